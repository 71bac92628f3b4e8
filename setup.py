# Advanced Multi-Mission Operations System (AMMOS) Instrument Toolkit (AIT)
# Bespoke Link to Instruments and Small Satellites (BLISS)
#
# Copyright 2017, by the California Institute of Technology. ALL RIGHTS
# RESERVED. United States Government Sponsorship acknowledged. Any
# commercial use must be negotiated with the Office of Technology Transfer
# at the California Institute of Technology.
#
# This software may be subject to U.S. export control laws. By accepting
# this software, the user agrees to comply with all applicable U.S. export
# laws and regulations. User has the responsibility to obtain export licenses,
# or other export authority as may be required before exporting such
# information to foreign countries or providing access to foreign persons.

from setuptools import setup, find_packages

description = "AIT SLE provides the Space Link Extension (SLE) service instance " \
              "engine: CDS time codec, ISP1 credentials and the binding state machine."

setup(
    name = 'ait-sle',
    version = '1.0.0',
    description  = description,
    long_description = description,
    url = 'https://github.com/NASA-AMMOS/AIT-DSN',
    packages = find_packages(include=['ait', 'ait.*']),
    package_data = {'ait.sle.test': ['testdata/*.yaml']},
    author = 'AIT Development Team',
    author_email='ait-pmc@googlegroups.com',

    python_requires = '>=3.10, <3.12',

    install_requires = [
        'ait-core>=3.1',
        'greenlet',
        'gevent',
        'pyasn1',
    ],

    extras_require = {
        'tests': [
            'pytest',
            'coverage',
            'mock',
            'pylint'
        ],
    },
)
