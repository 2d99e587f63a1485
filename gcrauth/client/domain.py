# Copyright 2017 Google Inc. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""This package defines the domains a registry credential may be used in.

A caller describes where it intends to use a credential as a list of
requirements (scheme, hostname, port), and a Domain is a collection of
specifications that each either accept, reject or ignore a requirement.
"""



import abc
import re
from urllib import parse as urlparse


class BadRequirementException(Exception):
  """Exceptions when a malformed requirement is supplied."""


# Specification results.
MATCHED = 'matched'
NEGATIVE = 'negative'
UNKNOWN = 'unknown'


class Requirement(object):
  """Base class for the things a credential lookup may require."""

  def __eq__(self, other):
    return type(self) is type(other) and vars(self) == vars(other)

  def __ne__(self, other):
    return not self.__eq__(other)

  def __hash__(self):
    return hash((type(self).__name__,) + tuple(sorted(vars(self).items())))

  def __repr__(self):
    return '%s(%s)' % (type(self).__name__, ', '.join(
        '%s=%r' % item for item in sorted(vars(self).items())))


class SchemeRequirement(Requirement):
  """Requires the credential be usable with the given URI scheme."""

  def __init__(self, scheme):
    if not scheme:
      raise BadRequirementException('A scheme must be specified')
    self.scheme = scheme


class HostnameRequirement(Requirement):
  """Requires the credential be usable against the given host."""

  def __init__(self, hostname):
    if not hostname:
      raise BadRequirementException('A hostname must be specified')
    self.hostname = hostname


class HostnamePortRequirement(HostnameRequirement):
  """Requires the credential be usable against the given host and port."""

  def __init__(self, hostname, port):
    super(HostnamePortRequirement, self).__init__(hostname)
    self.port = int(port)


def FromUri(uri):
  """Builds the requirements for using a credential against a URI.

  Args:
    uri: either a full URI (https://gcr.io/v2/) or a registry name such as
      'gcr.io' or 'localhost:5000'.

  Returns:
    A list of Requirement.

  Raises:
    BadRequirementException: no hostname could be found in uri.
  """
  if '://' not in uri:
    # Registry names carry no scheme, only the host (and maybe a port).
    parsed = urlparse.urlsplit('//' + uri)
    requirements = []
  else:
    parsed = urlparse.urlsplit(uri)
    requirements = [SchemeRequirement(parsed.scheme)]

  if not parsed.hostname:
    raise BadRequirementException('Unable to find a hostname in: %s' % uri)

  try:
    port = parsed.port
  except ValueError:
    raise BadRequirementException('Invalid port in: %s' % uri)

  if port is not None:
    requirements.append(HostnamePortRequirement(parsed.hostname, port))
  else:
    requirements.append(HostnameRequirement(parsed.hostname))
  return requirements


def Split(value):
  """Splits a list of patterns separated by commas and/or whitespace."""
  return [x for x in re.split(r'[\s,]+', value or '') if x]


def _wildcard(pattern):
  parts = [re.escape(x) for x in pattern.split('*')]
  return re.compile('^' + '.*'.join(parts) + '$', re.IGNORECASE)


class Specification(metaclass=abc.ABCMeta):
  """Interface for the individual constraints that make up a Domain."""

  @abc.abstractmethod
  def test(self, requirement):
    """Tests a single requirement.

    Args:
      requirement: the Requirement to check.

    Returns:
      MATCHED, NEGATIVE, or UNKNOWN when this specification does not
      understand the kind of requirement.
    """


class SchemeSpecification(Specification):
  """Restricts a Domain to a comma separated list of URI schemes."""

  def __init__(self, schemes):
    self._schemes = set(x.lower() for x in Split(schemes))

  @property
  def schemes(self):
    return ','.join(sorted(self._schemes))

  def test(self, requirement):
    if not isinstance(requirement, SchemeRequirement):
      return UNKNOWN
    if requirement.scheme.lower() in self._schemes:
      return MATCHED
    return NEGATIVE


class HostnameSpecification(Specification):
  """Restricts a Domain to hosts matching include and exclude patterns.

  Both includes and excludes are lists of host patterns separated by commas
  or whitespace, where '*' stands for any run of characters, e.g.
  'gcr.io,*.gcr.io'.  An empty includes list admits every host; excludes
  always win.
  """

  def __init__(self, includes, excludes):
    self._includes = includes or ''
    self._excludes = excludes or ''
    self._include_patterns = [_wildcard(x) for x in Split(includes)]
    self._exclude_patterns = [_wildcard(x) for x in Split(excludes)]

  @property
  def includes(self):
    return self._includes

  @property
  def excludes(self):
    return self._excludes

  def test(self, requirement):
    if not isinstance(requirement, HostnameRequirement):
      return UNKNOWN
    hostname = requirement.hostname
    if self._include_patterns and not any(
        p.match(hostname) for p in self._include_patterns):
      return NEGATIVE
    if any(p.match(hostname) for p in self._exclude_patterns):
      return NEGATIVE
    return MATCHED


class Domain(object):
  """A named collection of specifications."""

  def __init__(self, name, description, specifications):
    self._name = name
    self._description = description
    self._specifications = list(specifications or [])

  @property
  def name(self):
    return self._name

  @property
  def description(self):
    return self._description

  @property
  def specifications(self):
    return list(self._specifications)

  def test(self, requirements):
    """Whether credentials in this domain satisfy all the requirements."""
    for requirement in requirements or []:
      for specification in self._specifications:
        if specification.test(requirement) == NEGATIVE:
          return False
    return True
