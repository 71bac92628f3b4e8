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

''' SLE Service Instance Identifiers

A service instance identifier is written as four dot separated
``key=value`` segments, for example::

    sagr=1.spack=VST-PASS0001.rsl-fg=1.raf=onlt1

The keys in the string are not interpreted. The attribute kind of each
segment is fixed by its position and, for the last two segments, by the
service type:

    1. sagr   (service agreement)
    2. spack  (service package)
    3. rslFg  (return services) / fslFg (forward services)
    4. raf, rcf, rocf, cltu or fsp
'''

from collections import namedtuple
from enum import Enum

import ait.core.log
from ait.sle.errors import UnsupportedServiceType, InvalidServiceInstanceIdentifier
from ait.sle.pdu import service_instance as sii_pdu
from ait.sle.pdu.binds import ApplicationIdentifier


class ServiceType(Enum):
    ''' SLE service types supported by the engine

    Each member carries the ASN.1 application identifier used in the BIND
    invocation and the attribute kinds of the last two identifier segments.
    '''
    RAF = ('rtnAllFrames', 'rslFg', 'raf')
    RCF = ('rtnChFrames', 'rslFg', 'rcf')
    ROCF = ('rtnChOcf', 'rslFg', 'rocf')
    CLTU = ('fwdCltu', 'fslFg', 'cltu')
    FSP = ('fwdTcSpacePkt', 'fslFg', 'fsp')

    def __init__(self, application_id, functional_group, service_kind):
        self.application_id = application_id
        self.functional_group = functional_group
        self.service_kind = service_kind

    @property
    def is_return(self):
        return self.functional_group == 'rslFg'

    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise UnsupportedServiceType(name)

    @classmethod
    def from_application_id(cls, application_id):
        value = int(application_id)
        for service_type in cls:
            if int(ApplicationIdentifier(service_type.application_id)) == value:
                return service_type
        raise UnsupportedServiceType(application_id)


class Role(Enum):
    USER = 'user'
    PROVIDER = 'provider'

    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name
        return cls(str(name).lower())


SiAttribute = namedtuple('SiAttribute', ['kind', 'value'])


class ServiceInstanceIdentifier(object):
    ''' Ordered (attribute kind, value) pairs identifying a service instance '''

    def __init__(self, attributes):
        self._attributes = tuple(SiAttribute(*a) for a in attributes)

    @property
    def attributes(self):
        return self._attributes

    @property
    def kinds(self):
        return [a.kind for a in self._attributes]

    @property
    def values(self):
        return [a.value for a in self._attributes]

    def __iter__(self):
        return iter(self._attributes)

    def __len__(self):
        return len(self._attributes)

    def __eq__(self, other):
        if not isinstance(other, ServiceInstanceIdentifier):
            return NotImplemented
        return self._attributes == other._attributes

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self._attributes)

    def __repr__(self):
        return 'ServiceInstanceIdentifier({!r})'.format(self.format())

    def format(self):
        return format_identifier(self)

    def to_asn1(self):
        ''' Build the ASN.1 ServiceInstanceIdentifier for a BIND invocation '''
        sii = sii_pdu.ServiceInstanceIdentifier()
        for i, attribute in enumerate(self._attributes):
            siae = sii_pdu.ServiceInstanceAttributeElement()
            siae['identifier'] = sii_pdu.OID_VALUES[attribute.kind]
            siae['siAttributeValue'] = attribute.value
            sia = sii_pdu.ServiceInstanceAttribute()
            sia[0] = siae
            sii[i] = sia
        return sii

    @classmethod
    def from_asn1(cls, sii):
        ''' Read a decoded ASN.1 ServiceInstanceIdentifier

        Raises:
            InvalidServiceInstanceIdentifier: if an attribute identifier is
                not one of the known service instance OIDs.
        '''
        kinds = dict((tuple(oid), kind) for kind, oid in sii_pdu.OID_VALUES.items())
        attributes = []
        for sia in sii:
            for siae in sia:
                oid = tuple(siae['identifier'])
                if oid not in kinds:
                    raise InvalidServiceInstanceIdentifier(
                        'Unknown service instance attribute {}'.format('.'.join(str(c) for c in oid)))
                attributes.append((kinds[oid], str(siae['siAttributeValue'])))
        return cls(attributes)


def parse_identifier(identifier, service_type):
    ''' Build a ServiceInstanceIdentifier from its string representation

    Arguments:
        identifier:
            The dotted ``key=value`` string.

        service_type:
            A ServiceType or its name ('raf', 'CLTU', ...).

    Raises:
        UnsupportedServiceType: if the service type is unknown.
        InvalidServiceInstanceIdentifier: if the string does not hold
            exactly four ``key=value`` segments.
    '''
    service_type = ServiceType.from_name(service_type)
    ait.core.log.debug('Building SIID from string {}, service {}'.format(identifier, service_type.name))

    segments = identifier.split('.')
    if len(segments) != 4:
        raise InvalidServiceInstanceIdentifier(
            'Expected 4 segments in service instance identifier, got {}: {}'.format(len(segments), identifier))

    values = []
    for segment in segments:
        parts = segment.split('=', 1)
        if len(parts) != 2:
            raise InvalidServiceInstanceIdentifier(
                "Segment '{}' of {} is not of the form key=value".format(segment, identifier))
        values.append(parts[1])

    kinds = ['sagr', 'spack', service_type.functional_group, service_type.service_kind]
    return ServiceInstanceIdentifier(zip(kinds, values))


def format_identifier(sii):
    ''' Render a ServiceInstanceIdentifier back to its dotted string form '''
    return '.'.join('{}={}'.format(a.kind, a.value) for a in sii)
