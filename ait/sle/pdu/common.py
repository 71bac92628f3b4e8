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

from pyasn1.type import univ, char, namedtype, namedval, tag, constraint

###############################################################################
#
# SLE Service Common Types
#
###############################################################################
class Diagnostics(univ.Integer):
    pass


Diagnostics.namedValues = namedval.NamedValues(
    ('duplicateInvokeId', 100),
    ('otherReason', 127)
)


class IntPosShort(univ.Integer):
    pass


IntPosShort.subtypeSpec = constraint.ValueRangeConstraint(1, 65535)


class IntUnsignedLong(univ.Integer):
    pass


IntUnsignedLong.subtypeSpec = constraint.ValueRangeConstraint(0, 4294967295)


class IntUnsignedShort(univ.Integer):
    pass


IntUnsignedShort.subtypeSpec = constraint.ValueRangeConstraint(0, 65535)


class InvokeId(IntUnsignedShort):
    pass


class SpaceLinkDataUnit(univ.OctetString):
    pass


SpaceLinkDataUnit.subtypeSpec = constraint.ValueSizeConstraint(1, 65536)


class TimeCCSDS(univ.OctetString):
    pass


TimeCCSDS.subtypeSpec = constraint.ValueSizeConstraint(8, 8)


class TimeCCSDSpico(univ.OctetString):
    pass


TimeCCSDSpico.subtypeSpec = constraint.ValueSizeConstraint(10, 10)


class Time(univ.Choice):
    pass


Time.componentType = namedtype.NamedTypes(
    namedtype.NamedType('ccsdsFormat', TimeCCSDS().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0))),
    namedtype.NamedType('ccsdsPicoFormat', TimeCCSDSpico().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 1)))
)


class ConditionalTime(univ.Choice):
    pass


ConditionalTime.componentType = namedtype.NamedTypes(
    namedtype.NamedType('undefined', univ.Null().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0))),
    namedtype.NamedType('known', Time().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1)))
)


###############################################################################
#
# ISP1 Credentials (CCSDS 913.1-B-2, 3.1.2)
#
###############################################################################
class RandomNumber(univ.Integer):
    pass


RandomNumber.subtypeSpec = constraint.ValueRangeConstraint(0, 2147483647)


class HashInput(univ.Sequence):
    pass


HashInput.componentType = namedtype.NamedTypes(
    namedtype.NamedType('time', TimeCCSDS()),
    namedtype.NamedType('randomNumber', RandomNumber()),
    namedtype.NamedType('username', char.VisibleString()),
    namedtype.NamedType('password', univ.OctetString())
)


class ISP1Credentials(univ.Sequence):
    pass


# 20 bytes for SHA-1 (SLE versions 1-3), 32 bytes for SHA-256 (versions 4-5)
ISP1Credentials.componentType = namedtype.NamedTypes(
    namedtype.NamedType('time', TimeCCSDS()),
    namedtype.NamedType('randomNumber', RandomNumber()),
    namedtype.NamedType('theProtected', univ.OctetString().subtype(subtypeSpec=constraint.ValueSizeConstraint(20, 32)))
)


class Credentials(univ.Choice):
    pass


Credentials.componentType = namedtype.NamedTypes(
    namedtype.NamedType('unused', univ.Null().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0))),
    namedtype.NamedType('used', univ.OctetString().subtype(subtypeSpec=constraint.ValueSizeConstraint(8, 256)).subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 1)))
)


###############################################################################
#
# SLE Service Common PDUS
#
###############################################################################
class SleAcknowledgement(univ.Sequence):
    pass


SleAcknowledgement.componentType = namedtype.NamedTypes(
    namedtype.NamedType('credentials', Credentials()),
    namedtype.NamedType('invokeId', InvokeId()),
    namedtype.NamedType('result', univ.Choice(componentType=namedtype.NamedTypes(
        namedtype.NamedType('positiveResult', univ.Null().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0))),
        namedtype.NamedType('negativeResult', Diagnostics().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 1)))
    ))
    )
)


class SleStopInvocation(univ.Sequence):
    pass


SleStopInvocation.componentType = namedtype.NamedTypes(
    namedtype.NamedType('invokerCredentials', Credentials()),
    namedtype.NamedType('invokeId', InvokeId())
)
