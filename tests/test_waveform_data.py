"""
Tests for the .dat / .json waveform data readers
"""
import json
import os
import struct
import tempfile
import unittest

import numpy as np

from audiowaveform_client.errors import WaveformDataError
from audiowaveform_client.waveform_data import load_waveform, parse_dat, parse_json


def dat_v1(values, bits=16, sample_rate=44100, spp=256):
    flags = 1 if bits == 8 else 0
    fmt = 'b' if bits == 8 else 'h'
    length = len(values) // 2
    header = struct.pack('<iIiiI', 1, flags, sample_rate, spp, length)
    return header + struct.pack(f'<{len(values)}{fmt}', *values)


def dat_v2(values, channels, bits=8, sample_rate=48000, spp=512):
    flags = 1 if bits == 8 else 0
    fmt = 'b' if bits == 8 else 'h'
    length = len(values) // (2 * channels)
    header = struct.pack('<iIiiIi', 2, flags, sample_rate, spp, length, channels)
    return header + struct.pack(f'<{len(values)}{fmt}', *values)


class TestParseDat(unittest.TestCase):
    def test_version_1_sixteen_bit(self):
        wf = parse_dat(dat_v1([-100, 100, -32768, 32767, 0, 5]))
        self.assertEqual(wf.version, 1)
        self.assertEqual(wf.channels, 1)
        self.assertEqual(wf.bits, 16)
        self.assertEqual(wf.length, 3)
        self.assertEqual(wf.samples.shape, (3, 1, 2))
        np.testing.assert_array_equal(wf.channel(0)[:, 0], [-100, -32768, 0])
        np.testing.assert_array_equal(wf.channel(0)[:, 1], [100, 32767, 5])
        self.assertEqual(wf.summary()['peak'], 32768)

    def test_version_2_eight_bit_stereo(self):
        # point 0: L(-1, 1) R(-2, 2); point 1: L(-3, 3) R(-128, 127)
        wf = parse_dat(dat_v2([-1, 1, -2, 2, -3, 3, -128, 127], channels=2))
        self.assertEqual(wf.version, 2)
        self.assertEqual(wf.channels, 2)
        self.assertEqual(wf.bits, 8)
        self.assertEqual(wf.length, 2)
        np.testing.assert_array_equal(wf.channel(1), [[-2, 2], [-128, 127]])
        self.assertEqual(wf.summary()['peak'], 128)
        with self.assertRaises(IndexError):
            wf.channel(2)

    def test_duration(self):
        wf = parse_dat(dat_v1([0, 0] * 100, sample_rate=25600, spp=256))
        self.assertAlmostEqual(wf.duration, 1.0)

    def test_truncated_body(self):
        data = dat_v1([1, 2, 3, 4])[:-2]
        with self.assertRaises(WaveformDataError):
            parse_dat(data)

    def test_short_header_and_bad_version(self):
        with self.assertRaises(WaveformDataError):
            parse_dat(b'\x01\x00')
        with self.assertRaises(WaveformDataError):
            parse_dat(struct.pack('<iIiiI', 3, 0, 44100, 256, 0))


class TestParseJson(unittest.TestCase):
    def test_version_2(self):
        doc = {
            'version': 2, 'channels': 1, 'sample_rate': 44100,
            'samples_per_pixel': 256, 'bits': 8, 'length': 2,
            'data': [-5, 5, -10, 12],
        }
        wf = parse_json(json.dumps(doc))
        self.assertEqual(wf.length, 2)
        self.assertEqual(wf.bits, 8)
        self.assertEqual(wf.summary()['peak'], 12)

    def test_missing_fields(self):
        with self.assertRaises(WaveformDataError):
            parse_json(json.dumps({'version': 2, 'data': []}))
        with self.assertRaises(WaveformDataError):
            parse_json('not json')

    def test_length_mismatch(self):
        doc = {'sample_rate': 8000, 'samples_per_pixel': 64, 'bits': 16, 'length': 3, 'data': [0, 0]}
        with self.assertRaises(WaveformDataError):
            parse_json(json.dumps(doc))

    def test_malformed_data_values(self):
        base = {'sample_rate': 8000, 'samples_per_pixel': 64, 'bits': 16, 'length': 1}
        for data in (['a', 'b'], [[1, 2], [3]], [[1, 2]], [0.5, 1.5], [True, False], [40000, 0],
                     [10 ** 30, 0], None, 'abc'):
            with self.assertRaises(WaveformDataError, msg=repr(data)):
                parse_json(json.dumps(dict(base, data=data)))

    def test_eight_bit_range(self):
        doc = {'sample_rate': 8000, 'samples_per_pixel': 64, 'bits': 8, 'length': 1, 'data': [-128, 127]}
        self.assertEqual(parse_json(json.dumps(doc)).samples.tolist(), [[[-128, 127]]])
        doc['data'] = [-300, 300]
        with self.assertRaises(WaveformDataError):
            parse_json(json.dumps(doc))


class TestLoadWaveform(unittest.TestCase):
    def test_dispatch_by_extension(self):
        with tempfile.TemporaryDirectory() as tmp:
            dat_path = os.path.join(tmp, 'ep.dat')
            with open(dat_path, 'wb') as f:
                f.write(dat_v1([-1, 1]))
            json_path = os.path.join(tmp, 'ep.JSON')
            with open(json_path, 'w', encoding='utf-8') as f:
                json.dump({'sample_rate': 8000, 'samples_per_pixel': 64, 'bits': 16,
                           'length': 1, 'data': [-7, 7]}, f)

            self.assertEqual(load_waveform(dat_path).length, 1)
            self.assertEqual(load_waveform(json_path).summary()['peak'], 7)

            with self.assertRaises(WaveformDataError):
                load_waveform(os.path.join(tmp, 'ep.png'))
            with self.assertRaises(WaveformDataError):
                load_waveform(os.path.join(tmp, 'missing.dat'))


if __name__ == '__main__':
    unittest.main()
