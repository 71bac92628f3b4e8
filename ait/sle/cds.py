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

''' CCSDS Day Segmented (CDS) Time Codec

The ait.sle.cds module converts between Unix epoch milliseconds and the two
CDS time codes used by SLE (implicit P-field, epoch 1958-01-01):

    8 bytes:  days (u16) | milliseconds of day (u32) | microseconds of ms (u16)
    10 bytes: days (u16) | milliseconds of day (u32) | picoseconds of ms (u32)

All fields are big-endian. Reference: CCSDS 301.0-B-4, section 3.3.

Attributes:
    CONTEXT: The CdsContext computed once at import time and used by
        default by every codec function.

Classes:
    Precision: The sub-millisecond resolution of a CDS time code.
    CdsContext: Epoch constants shared by the codec.
    CdsTime: Immutable decoded CDS time value.
'''

from collections import namedtuple
import datetime as dt
from enum import Enum
import struct

from ait.sle.errors import InvalidTimeValue, EpochUnderflow
from ait.sle.pdu.common import ConditionalTime

MILLIS_PER_DAY = 86400 * 1000


class Precision(Enum):
    MILLISECOND = ('!HIH', 8, 1000)
    PICOSECOND = ('!HII', 10, 1000000000)

    def __init__(self, fmt, length, units_per_milli):
        self.fmt = fmt
        self.length = length
        self.units_per_milli = units_per_milli

    @classmethod
    def for_length(cls, length):
        for precision in cls:
            if precision.length == length:
                return precision
        raise InvalidTimeValue('CDS time must be 8 or 10 bytes, got {}'.format(length))


class CdsContext(object):
    ''' Epoch constants for the CDS codec

    The day distance between the CCSDS epoch and the Unix epoch is computed
    once when the context is created and never changes afterwards.
    '''

    def __init__(self):
        self._ccsds_epoch = dt.datetime(1958, 1, 1)
        self._unix_epoch = dt.datetime(1970, 1, 1)
        self._days_from_1958_to_1970 = (self._unix_epoch - self._ccsds_epoch).days

    @property
    def ccsds_epoch(self):
        return self._ccsds_epoch

    @property
    def unix_epoch(self):
        return self._unix_epoch

    @property
    def days_from_1958_to_1970(self):
        return self._days_from_1958_to_1970


CONTEXT = CdsContext()


class CdsTime(namedtuple('CdsTime', ['days', 'millis_of_day', 'sub_millis', 'precision'])):
    ''' Decoded CDS time code

    ``days`` counts from 1958-01-01, ``sub_millis`` is expressed in
    microseconds or picoseconds depending on ``precision``.
    '''
    __slots__ = ()

    @classmethod
    def from_bytes(cls, buffer, precision=None):
        buffer = bytes(buffer)
        if precision is None:
            precision = Precision.for_length(len(buffer))
        if len(buffer) != precision.length:
            raise InvalidTimeValue('Expected {} CDS bytes, got {}'.format(precision.length, len(buffer)))
        return cls(*struct.unpack(precision.fmt, buffer), precision=precision)

    def to_bytes(self):
        return struct.pack(self.precision.fmt, self.days, self.millis_of_day, self.sub_millis)

    def epoch_millis(self, context=CONTEXT):
        if self.days < context.days_from_1958_to_1970:
            raise EpochUnderflow(self.to_bytes())
        return (self.days - context.days_from_1958_to_1970) * MILLIS_PER_DAY + self.millis_of_day


def encode_cds(epoch_millis, sub_millis=0, precision=Precision.MILLISECOND, context=CONTEXT):
    ''' Encode a Unix epoch time as a CDS time code

    Arguments:
        epoch_millis:
            Milliseconds since 1970-01-01T00:00:00Z.

        sub_millis:
            Microseconds (MILLISECOND precision) or picoseconds (PICOSECOND
            precision) within the millisecond. Values of a millisecond or
            more roll over into the millisecond field.

        precision:
            The Precision of the encoded time code.

    Returns:
        The 8 or 10 byte CDS time code.

    Raises:
        InvalidTimeValue: if either value is negative or the time does
            not fit in the 16 bit day field.
    '''
    if epoch_millis < 0 or sub_millis < 0:
        raise InvalidTimeValue('Negative value provided: {}, {}'.format(epoch_millis, sub_millis))

    total_millis = epoch_millis + sub_millis // precision.units_per_milli
    sub_millis %= precision.units_per_milli

    days = total_millis // MILLIS_PER_DAY + context.days_from_1958_to_1970
    if days > 0xFFFF:
        raise InvalidTimeValue('Time {} ms is beyond the CDS day range'.format(epoch_millis))

    return CdsTime(days, total_millis % MILLIS_PER_DAY, sub_millis, precision).to_bytes()


def decode_cds(buffer, precision=None, context=CONTEXT):
    ''' Decode a CDS time code into (epoch milliseconds, sub-millisecond units)

    Raises:
        InvalidTimeValue: if the buffer length does not match the precision.
        EpochUnderflow: if the day field is earlier than 1970-01-01.
    '''
    cds = CdsTime.from_bytes(buffer, precision)
    return cds.epoch_millis(context), cds.sub_millis


def encode_datetime(datetime_, precision=Precision.MILLISECOND, context=CONTEXT):
    ''' Encode a UTC datetime as a CDS time code

    Naive datetimes are taken to be UTC.
    '''
    if datetime_.tzinfo is not None:
        datetime_ = datetime_.astimezone(dt.timezone.utc).replace(tzinfo=None)

    delta = datetime_ - context.unix_epoch
    if delta < dt.timedelta(0):
        raise InvalidTimeValue('Time {} is earlier than 1970-01-01'.format(datetime_))

    millis = (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000
    micros = delta.microseconds % 1000
    if precision is Precision.PICOSECOND:
        return encode_cds(millis, micros * 1000000, precision, context)
    return encode_cds(millis, micros, precision, context)


def decode_datetime(buffer, precision=None, context=CONTEXT):
    ''' Decode a CDS time code into a naive UTC datetime

    Picosecond time codes are truncated to microsecond resolution.
    '''
    cds = CdsTime.from_bytes(buffer, precision)
    millis = cds.epoch_millis(context)
    if cds.precision is Precision.PICOSECOND:
        micros = cds.sub_millis // 1000000
    else:
        micros = cds.sub_millis
    return context.unix_epoch + dt.timedelta(milliseconds=millis, microseconds=micros)


def conditional_time(datetime_=None, precision=Precision.MILLISECOND):
    ''' Build a ConditionalTime PDU element, 'undefined' when no time is given '''
    ctime = ConditionalTime()
    if datetime_ is None:
        ctime['undefined'] = None
    elif precision is Precision.PICOSECOND:
        ctime['known']['ccsdsPicoFormat'] = encode_datetime(datetime_, precision)
    else:
        ctime['known']['ccsdsFormat'] = encode_datetime(datetime_, precision)
    return ctime


def from_conditional_time(ctime):
    ''' Map a ConditionalTime PDU element to a datetime, or None if undefined '''
    if ctime is None or not ctime.isValue or ctime.getName() == 'undefined':
        return None

    known = ctime['known']
    if known.getName() == 'ccsdsPicoFormat':
        return decode_datetime(known['ccsdsPicoFormat'].asOctets(), Precision.PICOSECOND)
    return decode_datetime(known['ccsdsFormat'].asOctets(), Precision.MILLISECOND)
