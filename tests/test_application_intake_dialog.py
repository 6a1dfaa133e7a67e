from __future__ import annotations

import unittest

from garage.application.intake_dialog import (
    COULD_NOT_DECODE_MESSAGE,
    LOOKUP_FAILED_MESSAGE,
    IntakeDialogState,
)
from garage.domain.entities import DecodedVin, ExternalServiceError, VehicleRecord
from tests.fakes import CallbackRecorder

VIN = "1C4HJXDG0LW123456"
DECODED = DecodedVin(make="JEEP", model="Wrangler", year="2020", body_class="Sport Utility Vehicle (SUV)")


class IntakeDialogStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = CallbackRecorder()
        self.state = IntakeDialogState(on_add_vehicle=self.host.on_save, on_close=self.host.on_close)
        self.state.open()

    def _decode(self, decoded=DECODED) -> None:
        self.state.set_vin(VIN)
        token, _ = self.state.start_lookup()
        self.state.finish_lookup(token, decoded=decoded)

    def test_decode_gate_requires_exact_length(self) -> None:
        for length in range(0, 17):
            self.state.set_vin("A" * length)
            self.assertFalse(self.state.can_decode)
            self.assertIsNone(self.state.start_lookup())
        self.state.set_vin("A" * 17)
        self.assertTrue(self.state.can_decode)

    def test_gate_ignores_surrounding_whitespace(self) -> None:
        self.state.set_vin(" " + VIN[:16])
        self.assertFalse(self.state.can_decode)
        self.assertIsNone(self.state.start_lookup())

    def test_edits_are_ignored_while_lookup_in_flight(self) -> None:
        self.state.set_vin(VIN)
        token, _ = self.state.start_lookup()
        self.state.set_vin("5YJ3E1EA7KF000000")
        self.assertEqual(self.state.vin, VIN)
        self.state.finish_lookup(token, decoded=DECODED)
        self.state.save()
        self.assertEqual([record.vin for record in self.host.saved], [VIN])

    def test_editing_vin_after_decode_clears_result(self) -> None:
        self._decode()
        self.state.set_vin("5YJ3E1EA7KF000000")
        self.assertIsNone(self.state.decoded)
        self.assertFalse(self.state.can_save)
        self.state.save()
        self.assertEqual(self.host.saved, [])

    def test_same_vin_edit_keeps_result(self) -> None:
        self._decode()
        self.state.set_vin(VIN.lower())
        self.assertEqual(self.state.decoded, DECODED)
        self.state.save()
        self.assertEqual([record.vin for record in self.host.saved], [VIN])

    def test_input_is_capped_at_vin_length(self) -> None:
        self.state.set_vin(VIN + "XYZ")
        self.assertEqual(self.state.vin, VIN)

    def test_successful_decode_and_save(self) -> None:
        self._decode()
        self.assertEqual(self.state.decoded, DECODED)
        self.assertTrue(self.state.can_save)
        self.state.save()
        self.assertEqual(
            self.host.saved,
            [VehicleRecord(vin=VIN, make="JEEP", model="Wrangler", year="2020",
                           body_class="Sport Utility Vehicle (SUV)")],
        )
        self.assertEqual(self.host.closed, 1)
        self.assertFalse(self.state.is_open)

    def test_missing_year_is_soft_failure(self) -> None:
        self._decode(DecodedVin(make="JEEP", model="Wrangler", year=""))
        self.assertIsNone(self.state.decoded)
        self.assertEqual(self.state.lookup.reason, COULD_NOT_DECODE_MESSAGE)

    def test_none_result_is_soft_failure(self) -> None:
        self._decode(None)
        self.assertEqual(self.state.lookup.reason, COULD_NOT_DECODE_MESSAGE)

    def test_service_error_is_hard_failure(self) -> None:
        self.state.set_vin(VIN)
        token, _ = self.state.start_lookup()
        self.state.finish_lookup(token, error=ExternalServiceError("down"))
        self.assertIsNone(self.state.decoded)
        self.assertEqual(self.state.lookup.reason, LOOKUP_FAILED_MESSAGE)
        self.assertTrue(self.state.can_decode)

    def test_new_lookup_clears_previous_result(self) -> None:
        self._decode()
        token, _ = self.state.start_lookup()
        self.assertIsNone(self.state.decoded)
        self.assertTrue(self.state.lookup.is_in_flight)
        self.assertFalse(self.state.can_decode)
        self.assertIsNone(self.state.start_lookup())
        self.state.finish_lookup(token, decoded=DECODED)
        self.assertEqual(self.state.decoded, DECODED)

    def test_barcode_detection_bypasses_length_gate(self) -> None:
        self.assertTrue(self.state.start_scan())
        self.assertIsNone(self.state.handle_detection(None))
        self.assertIsNone(self.state.handle_detection("   "))
        self.assertTrue(self.state.scanning)
        request = self.state.handle_detection(" i1c4hjxdg0lw12 ")
        self.assertIsNotNone(request)
        self.assertFalse(self.state.scanning)
        self.assertEqual(request[1], "I1C4HJXDG0LW12")
        self.assertEqual(self.state.vin, "I1C4HJXDG0LW12")
        self.assertTrue(self.state.lookup.is_in_flight)

    def test_only_first_detection_is_used(self) -> None:
        self.state.start_scan()
        self.assertIsNotNone(self.state.handle_detection(VIN))
        self.assertIsNone(self.state.handle_detection("OTHERVIN000000000"))

    def test_scan_failure_surfaces_message(self) -> None:
        self.state.start_scan()
        self.state.fail_scan("Camera is not available.")
        self.assertFalse(self.state.scanning)
        self.assertEqual(self.state.scan_error, "Camera is not available.")
        self.assertTrue(self.state.start_scan())
        self.assertIsNone(self.state.scan_error)

    def test_close_discards_everything(self) -> None:
        self.state.set_vin(VIN)
        token, _ = self.state.start_lookup()
        self.state.request_close()
        self.assertFalse(self.state.finish_lookup(token, decoded=DECODED))
        self.assertIsNone(self.state.decoded)
        self.assertEqual(self.host.saved, [])
        self.assertEqual(self.host.closed, 1)

    def test_save_without_decode_only_closes(self) -> None:
        self.state.save()
        self.assertEqual(self.host.saved, [])
        self.assertEqual(self.host.closed, 1)

    def test_save_closes_even_when_host_fails(self) -> None:
        def failing_add(record: VehicleRecord) -> None:
            raise RuntimeError("db down")

        self.state.on_add_vehicle = failing_add
        self._decode()
        with self.assertRaises(RuntimeError):
            self.state.save()
        self.assertEqual(self.host.closed, 1)
        self.assertFalse(self.state.is_open)


class VehicleRecordTests(unittest.TestCase):
    def test_from_decoded_keeps_vin_and_drops_blank_body_class(self) -> None:
        record = VehicleRecord.from_decoded(DecodedVin(make="Ram", model="1500", year="2019", body_class=""), VIN)
        self.assertEqual(record, VehicleRecord(vin=VIN, make="Ram", model="1500", year="2019", body_class=None))
