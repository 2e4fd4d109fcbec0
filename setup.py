# -*- coding: utf-8 -*-
import codecs
from setuptools import setup, find_packages


tests_require = [
    'Flask>=2.0',
    'pytest>=7.0',
]

setup(
    name='birbl',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    url='https://www.birbl.com/',
    license='MIT',
    description='Object layer for the Birbl REST API',
    long_description=codecs.open('README.rst', encoding='utf-8').read(),
    tests_require=tests_require,
    python_requires='>=3.7',
    install_requires=[
        'requests>=2.20',
        'Werkzeug>=2.0',
        'jsonschema>=3.0',
        'aniso8601>=0.84',
        'blinker>=1.3',
    ],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    zip_safe=False,
    extras_require={
        'tests': tests_require,
    }
)
