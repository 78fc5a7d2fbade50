##############################################################################
#
# Copyright Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
from setuptools import setup


name = 'txtwiki'
version = '1.0.dev0'

entry_points = """
[console_scripts]
txtwiki = txtwiki.server:server

[paste.app_factory]
main = txtwiki:Application
"""


def read(fname):
    with open(fname) as f:
        return f.read()


setup(
    name=name,
    version=version,
    author="Zope Foundation and Contributors",
    author_email="zope-dev@zope.dev",
    description="A wiki that keeps each page in a text file",
    license="ZPL 2.1",
    keywords=["WSGI", "wiki"],
    long_description=read('README.rst') + '\n\n' + read('CHANGES.rst'),
    packages=['txtwiki'],
    package_dir={'': 'src'},
    package_data={'txtwiki': ['*.html', '*.test']},
    python_requires='>=3.7',
    install_requires=["bobo", "WebOb", "Jinja2"],
    extras_require={
        'test': ["WebTest", "zope.testing", "zope.testrunner", "pytest"],
    },
    entry_points=entry_points,
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: Zope Public License",
        "Natural Language :: English",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Internet :: WWW/HTTP :: WSGI",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Server",
    ],
    zip_safe=False,
)
