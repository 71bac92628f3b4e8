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

''' BIND, UNBIND and PEER-ABORT PDUs shared by every SLE service type '''

from pyasn1.type import univ, char, namedtype, namedval, tag

from ait.sle.pdu.common import Credentials, IntPosShort
from ait.sle.pdu.service_instance import ServiceInstanceIdentifier


def _context(number):
    return tag.Tag(tag.tagClassContext, tag.tagFormatSimple, number)


class ApplicationIdentifier(univ.Integer):
    ''' Service type requested in a BIND invocation '''
    namedValues = namedval.NamedValues(
        ('rtnAllFrames', 0), ('rtnInsert', 1), ('rtnChFrames', 2), ('rtnChFsh', 3),
        ('rtnChOcf', 4), ('rtnBitstr', 5), ('rtnSpacePkt', 6),
        ('fwdAosSpacePkt', 7), ('fwdAosVca', 8), ('fwdBitstr', 9), ('fwdProtoVcdu', 10),
        ('fwdInsert', 11), ('fwdCVcdu', 12), ('fwdTcSpacePkt', 13), ('fwdTcVca', 14),
        ('fwdTcFrame', 15), ('fwdCltu', 16)
    )


class AuthorityIdentifier(char.VisibleString):
    ''' Initiator or responder id, matched against the peer directory '''


class PortId(char.VisibleString):
    ''' Logical responder port name '''


class VersionNumber(IntPosShort):
    pass


class BindDiagnostic(univ.Integer):
    namedValues = namedval.NamedValues(
        ('accessDenied', 0), ('serviceTypeNotSupported', 1), ('versionNotSupported', 2),
        ('noSuchServiceInstance', 3), ('alreadyBound', 4), ('siNotAccessibleToThisInitiator', 5),
        ('inconsistentServiceType', 6), ('invalidTime', 7), ('outOfService', 8),
        ('otherReason', 127)
    )


class UnbindReason(univ.Integer):
    namedValues = namedval.NamedValues(
        ('end', 0), ('suspend', 1), ('versionNotSupported', 2), ('other', 127)
    )


class SlePeerAbort(univ.Integer):
    ''' PEER-ABORT diagnostic, the whole content of the invocation '''
    namedValues = namedval.NamedValues(
        ('accessDenied', 0), ('unexpectedResponderId', 1), ('operationalRequirement', 2),
        ('protocolError', 3), ('communicationsFailure', 4), ('encodingError', 5),
        ('returnTimeout', 6), ('endOfServiceProvisionPeriod', 7), ('unsolicitedInvokeId', 8),
        ('otherReason', 127)
    )


class SleBindInvocation(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('invokerCredentials', Credentials()),
        namedtype.NamedType('initiatorIdentifier', AuthorityIdentifier()),
        namedtype.NamedType('responderPortIdentifier', PortId()),
        namedtype.NamedType('serviceType', ApplicationIdentifier()),
        namedtype.NamedType('versionNumber', VersionNumber()),
        namedtype.NamedType('serviceInstanceIdentifier', ServiceInstanceIdentifier())
    )


class BindResult(univ.Choice):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('positive', VersionNumber().subtype(implicitTag=_context(0))),
        namedtype.NamedType('negative', BindDiagnostic().subtype(implicitTag=_context(1)))
    )


class SleBindReturn(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('performerCredentials', Credentials()),
        namedtype.NamedType('responderIdentifier', AuthorityIdentifier()),
        namedtype.NamedType('result', BindResult())
    )


class SleUnbindInvocation(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('invokerCredentials', Credentials()),
        namedtype.NamedType('unbindReason', UnbindReason())
    )


class UnbindResult(univ.Choice):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('positive', univ.Null().subtype(implicitTag=_context(0)))
    )


class SleUnbindReturn(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('responderCredentials', Credentials()),
        namedtype.NamedType('result', UnbindResult())
    )
