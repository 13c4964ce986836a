"""Unit tests for the structured JSON log formatter."""

import json
import logging
import sys
import unittest

from utils.logging import REDACTED, JSONFormatter


def _record(msg='User logged in', **extra) -> logging.LogRecord:
    record = logging.LogRecord('auth', logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_emits_json_with_extra_fields(self):
        payload = json.loads(self.formatter.format(_record(userId='u-1', provider='google')))

        self.assertEqual(payload['message'], 'User logged in')
        self.assertEqual(payload['level'], 'INFO')
        self.assertEqual(payload['logger'], 'auth')
        self.assertEqual(payload['userId'], 'u-1')
        self.assertEqual(payload['provider'], 'google')
        self.assertTrue(payload['timestamp'].endswith('Z'))

    def test_redacts_credentials(self):
        output = self.formatter.format(_record(
            password='Abcd1234', refresh_token='eyJ.abc', Authorization='Bearer x',
        ))
        payload = json.loads(output)

        self.assertEqual(payload['password'], REDACTED)
        self.assertEqual(payload['refresh_token'], REDACTED)
        self.assertEqual(payload['Authorization'], REDACTED)
        self.assertNotIn('Abcd1234', output)
        self.assertNotIn('eyJ.abc', output)

    def test_non_serializable_values_are_stringified(self):
        payload = json.loads(self.formatter.format(_record(providers={'google'})))
        self.assertEqual(payload['providers'], "{'google'}")

    def test_exception_is_included(self):
        try:
            raise RuntimeError('boom')
        except RuntimeError:
            record = _record(msg='Unhandled error')
            record.exc_info = sys.exc_info()

        payload = json.loads(self.formatter.format(record))
        self.assertIn('RuntimeError: boom', payload['exception'])


if __name__ == '__main__':
    unittest.main()
