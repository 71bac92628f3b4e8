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

''' SLE PDU Transport

A service instance hands encoded PDUs to a Transport and receives encoded
PDUs from it through a registered callback. Framing and delivery over a
byte stream (the TML) are the business of the concrete transport.

Classes:
    Transport: The interface a service instance expects.
    LoopbackTransport: An in-memory transport connecting two service
        instances in the same process.
'''

import gevent
import gevent.queue

import ait.core.log
from ait.sle import util


class Transport(object):
    ''' PDU transport interface '''

    def send_pdu(self, data):
        ''' Send one encoded PDU to the peer '''
        raise NotImplementedError

    def on_pdu_received(self, callback):
        ''' Register the function called with each encoded PDU received '''
        raise NotImplementedError

    def close(self):
        pass


class LoopbackTransport(Transport):
    ''' In-memory transport

    Data sent on one end of a pair is queued on the other end and handed to
    its callback from a dedicated greenlet, in order.
    '''

    def __init__(self):
        self._peer = None
        self._callback = None
        self._queue = gevent.queue.Queue()
        self._closed = False
        self._data_processor = gevent.spawn(self._process)

    @classmethod
    def pair(cls):
        ''' Create two connected transports '''
        a, b = cls(), cls()
        a._peer = b
        b._peer = a
        return a, b

    def send_pdu(self, data):
        if self._closed or self._peer is None or self._peer._closed:
            raise IOError('Loopback transport is not connected')
        self._peer._queue.put(bytes(data))

    def on_pdu_received(self, callback):
        self._callback = callback

    def close(self):
        if not self._closed:
            self._closed = True
            self._queue.put(StopIteration)

    def _process(self):
        for data in self._queue:
            if self._callback is None:
                ait.core.log.warn('No receiver registered, dropping PDU\n{}'.format(util.hexdump(data)))
                continue
            self._callback(data)
