"""
Naming conventions used to derive API paths and relation types from resource names.

Only the English inflections needed for resource names are covered: regular plurals, ``-y`` to ``-ies``,
sibilant endings and a small table of irregular and uncountable words.
"""
import re

IRREGULAR = {
    'person': 'people',
    'child': 'children',
    'man': 'men',
    'woman': 'women',
}

UNCOUNTABLE = {'equipment', 'information', 'series', 'species', 'media'}

_PLURAL_RULES = (
    (r'(quiz)$', r'\1zes'),
    (r'([^aeiouy]|qu)y$', r'\1ies'),
    (r'(x|ch|ss|sh|zz)$', r'\1es'),
    (r'(bus|alias|status)$', r'\1es'),
    (r'([^f])fe$', r'\1ves'),
    (r'([lr])f$', r'\1ves'),
    (r's$', r's'),
    (r'$', r's'),
)

_SINGULAR_RULES = (
    (r'(quiz)zes$', r'\1'),
    (r'([^aeiouy]|qu)ies$', r'\1y'),
    (r'(x|ch|ss|sh|zz)es$', r'\1'),
    (r'(bus|alias|status)es$', r'\1'),
    (r'([lr])ves$', r'\1f'),
    (r'([^f])ves$', r'\1fe'),
    (r'(ss|us)$', r'\1'),
    (r's$', r''),
)


def _inflect(word, rules, irregular):
    if not word or word.lower() in UNCOUNTABLE:
        return word

    if word.lower() in irregular:
        return irregular[word.lower()]

    for pattern, replacement in rules:
        if re.search(pattern, word, re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word


def pluralize(word):
    """
    >>> pluralize('activity'), pluralize('address'), pluralize('partner')
    ('activities', 'addresses', 'partners')
    """
    return _inflect(word, _PLURAL_RULES, IRREGULAR)


def singularize(word):
    """
    >>> singularize('activities'), singularize('addresses'), singularize('reservations')
    ('activity', 'address', 'reservation')
    """
    return _inflect(word, _SINGULAR_RULES, {v: k for k, v in IRREGULAR.items()})


def strip_namespace(name, namespace):
    """
    Removes a leading ``namespace/`` from a qualified name.

    >>> strip_namespace('birbl/activities', 'birbl')
    'activities'
    """
    if not namespace:
        return name
    return re.sub(r'^{}/'.format(re.escape(namespace)), '', name)
