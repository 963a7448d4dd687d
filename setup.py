"""
icsx: module for reading and writing iCalendar files

Description
-----------

Parses iCalendar (RFC 5545) documents into frozen Python data structures:
a Calendar holding its events and alarms, each keeping its raw properties in
document order next to derived fields such as the start and end instants.
Serializes those properties back to folded iCalendar text.

Requirements
------------

Requires python 3.8 or later, dateutil 2.7.0 or later and pytz.
"""

from setuptools import setup, find_packages

doclines = (__doc__ or '').splitlines()

setup(name = "icsx",
      license = "Apache",
      zip_safe = True,
      include_package_data = True,
      python_requires = ">=3.8",
      install_requires=["python-dateutil >= 2.7.0",
                        "pytz"],
      extras_require = {"test": ["pytest"]},
      platforms = ["any"],
      packages = find_packages(exclude=["tests", "tests.*"]),
      description = "A streaming parser and serializer for iCalendar files",
      long_description = "\n".join(doclines[2:]),
      keywords = ['icalendar', 'ics', 'rfc5545', 'calendar'],
      classifiers =  """
      Development Status :: 3 - Alpha
      Intended Audience :: Developers
      License :: OSI Approved :: Apache Software License
      Natural Language :: English
      Operating System :: OS Independent
      Programming Language :: Python
      Programming Language :: Python :: 3
      Topic :: Text Processing""".strip().splitlines()
      )
