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

import time


def hexdump(data, width=16):
    ''' Render bytes as rows of upper-case hex pairs for diagnostics '''
    if data is None:
        return '<NULL>'
    data = bytes(data)
    rows = []
    for i in range(0, len(data), width):
        chunk = data[i:i + width]
        rows.append('{:04X}: {}'.format(i, ' '.join('{:02X}'.format(c) for c in chunk)))
    return '\n'.join(rows) if rows else '<EMPTY>'


def current_time_millis():
    ''' Wall-clock time in milliseconds since the Unix epoch '''
    return int(time.time() * 1000)

