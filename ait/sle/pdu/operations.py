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

''' Generic SLE operation PDUs

The service-specific PDU catalogues (RAF, RCF, ROCF, CLTU, FSP) share the
binding and start/stop/transfer skeleton defined here. Service-specific
start parameters are carried in ``startQualifier`` and filled in by the
service capability of the ait.sle.service module.
'''

from pyasn1.codec.ber.encoder import encode
from pyasn1.codec.ber.decoder import decode
from pyasn1.type import univ, namedtype, tag

from ait.sle.pdu.common import (ConditionalTime, Credentials, IntUnsignedLong,
                                InvokeId, SleAcknowledgement, SleStopInvocation,
                                SpaceLinkDataUnit, Time)
from ait.sle.pdu.binds import (SleBindInvocation, SleBindReturn, SlePeerAbort,
                               SleUnbindInvocation, SleUnbindReturn)


class SleStartInvocation(univ.Sequence):
    pass


SleStartInvocation.componentType = namedtype.NamedTypes(
    namedtype.NamedType('invokerCredentials', Credentials()),
    namedtype.NamedType('invokeId', InvokeId()),
    namedtype.NamedType('startTime', ConditionalTime()),
    namedtype.NamedType('stopTime', ConditionalTime()),
    namedtype.NamedType('startQualifier', IntUnsignedLong())
)


class SleTransferDataInvocation(univ.Sequence):
    pass


SleTransferDataInvocation.componentType = namedtype.NamedTypes(
    namedtype.NamedType('invokerCredentials', Credentials()),
    namedtype.NamedType('earthReceiveTime', Time()),
    namedtype.NamedType('dataUnitId', IntUnsignedLong()),
    namedtype.NamedType('data', SpaceLinkDataUnit())
)


class SlePdu(univ.Choice):
    pass


SlePdu.componentType = namedtype.NamedTypes(
    namedtype.NamedType('bindInvocation', SleBindInvocation().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 100))),
    namedtype.NamedType('bindReturn', SleBindReturn().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 101))),
    namedtype.NamedType('unbindInvocation', SleUnbindInvocation().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 102))),
    namedtype.NamedType('unbindReturn', SleUnbindReturn().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 103))),
    namedtype.NamedType('startInvocation', SleStartInvocation().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0))),
    namedtype.NamedType('startReturn', SleAcknowledgement().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1))),
    namedtype.NamedType('stopInvocation', SleStopInvocation().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 2))),
    namedtype.NamedType('stopReturn', SleAcknowledgement().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 3))),
    namedtype.NamedType('transferDataInvocation', SleTransferDataInvocation().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 8))),
    namedtype.NamedType('peerAbortInvocation', SlePeerAbort().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 104)))
)


def encode_pdu(pdu):
    ''' BER encode an SlePdu '''
    return encode(pdu)


def decode_pdu(message):
    ''' Decode a BER encoded SlePdu

    Raises:
        pyasn1.error.PyAsn1Error
        TypeError
    '''
    pdu, _ = decode(bytes(message), asn1Spec=SlePdu())
    return pdu
