from blinker import Namespace

_birbl = Namespace()

before_create = _birbl.signal('before-create')

after_create = _birbl.signal('after-create')

before_update = _birbl.signal('before-update')

after_update = _birbl.signal('after-update')

before_delete = _birbl.signal('before-delete')

after_delete = _birbl.signal('after-delete')

before_add_to_relation = _birbl.signal('before-add-to-relation')

after_add_to_relation = _birbl.signal('after-add-to-relation')
