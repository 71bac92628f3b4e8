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

''' SLE Rate and Statistics Recording

Classes:
    Counters: Snapshot of the PDU and byte totals of a service instance.
    RateSample: Counters plus sampling instant and rates since the
        previous sample.
    RateRecorder: Listener that samples a service instance's counters and
        records its state history and received PDUs.
'''

from collections import namedtuple
import datetime as dt

from ait.sle.listener import ServiceInstanceListener


class Counters(namedtuple('Counters', ['pdu_in', 'bytes_in', 'pdu_out', 'bytes_out'])):
    __slots__ = ()

    def received(self, size):
        return self._replace(pdu_in=self.pdu_in + 1, bytes_in=self.bytes_in + size)

    def sent(self, size):
        return self._replace(pdu_out=self.pdu_out + 1, bytes_out=self.bytes_out + size)


Counters.ZERO = Counters(0, 0, 0, 0)


StateSample = namedtuple('StateSample', ['instant', 'state'])


def _now():
    return dt.datetime.now(dt.timezone.utc)


class RateSample(namedtuple('RateSample', ['instant', 'counters', 'pdu_in_rate', 'pdu_out_rate',
                                           'byte_in_rate', 'byte_out_rate'])):
    ''' Immutable sample of a service instance's traffic

    Rates are per second over the interval since the previous sample, and
    zero for a first sample.
    '''
    __slots__ = ()

    @classmethod
    def create(cls, counters, previous=None, instant=None):
        if instant is None:
            instant = _now()

        rates = [0.0, 0.0, 0.0, 0.0]
        if previous is not None:
            elapsed = (instant - previous.instant).total_seconds()
            if elapsed > 0:
                last = previous.counters
                rates = [(counters.pdu_in - last.pdu_in) / elapsed,
                         (counters.pdu_out - last.pdu_out) / elapsed,
                         (counters.bytes_in - last.bytes_in) / elapsed,
                         (counters.bytes_out - last.bytes_out) / elapsed]
        return cls(instant, counters, *rates)

    @property
    def pdu_in(self):
        return self.counters.pdu_in

    @property
    def pdu_out(self):
        return self.counters.pdu_out

    @property
    def bytes_in(self):
        return self.counters.bytes_in

    @property
    def bytes_out(self):
        return self.counters.bytes_out

    def __str__(self):
        return ('RateSample({}: PDU in={} ({:.1f}/s) out={} ({:.1f}/s), '
                'bytes in={} ({:.1f}/s) out={} ({:.1f}/s))').format(
            self.instant.isoformat(), self.pdu_in, self.pdu_in_rate, self.pdu_out, self.pdu_out_rate,
            self.bytes_in, self.byte_in_rate, self.bytes_out, self.byte_out_rate)


class RateRecorder(ServiceInstanceListener):
    ''' Lightweight statistics recorder for a service instance

    sample() reads the service instance counters without locking or
    modifying the service instance. The remaining statistics are collected
    from listener notifications, which arrive asynchronously.
    '''

    def __init__(self, service_instance=None):
        self._si = None
        self._handle = None
        self._last = None
        self._states = []
        self._pdu_received = 0
        self._pdu_sent = 0
        self._transfer_data_bytes_received = 0
        self._rejected = []
        if service_instance is not None:
            self.attach(service_instance)

    def attach(self, service_instance):
        self.detach()
        self._si = service_instance
        self._handle = service_instance.register(self)

    def detach(self):
        if self._si is not None:
            self._si.deregister(self._handle)
        self._si = None
        self._handle = None

    def sample(self):
        if self._si is None:
            raise ValueError('RateRecorder is not attached to a service instance')
        sample = RateSample.create(self._si.counters, self._last)
        self._last = sample
        return sample

    @property
    def states(self):
        return list(self._states)

    @property
    def pdu_received_count(self):
        return self._pdu_received

    @property
    def pdu_sent_count(self):
        return self._pdu_sent

    @property
    def transfer_data_bytes_received(self):
        return self._transfer_data_bytes_received

    @property
    def rejected(self):
        return list(self._rejected)

    def state_updated(self, si, state):
        self._states.append(StateSample(_now(), state))

    def pdu_received(self, si, name, pdu, encoded):
        self._pdu_received += 1
        if name == 'transferDataInvocation':
            self._transfer_data_bytes_received += len(pdu[name]['data'])

    def pdu_sent(self, si, name, pdu, encoded):
        self._pdu_sent += 1

    def pdu_rejected(self, si, name, reason):
        self._rejected.append((name, reason))
