from __future__ import annotations

import unittest
from decimal import Decimal

from sproc_repo import ParameterDirection, ProcedureCommand, ProcedureParameter
from sproc_repo.core import RETURN_VALUE_NAME, coerce_identity, is_success_code, new_identity


class ProcedureCommandTests(unittest.TestCase):
    def test_parameters_keep_registration_order(self) -> None:
        command = ProcedureCommand("dbo.Order_Insert")
        command.add_input("Total", 42)
        command.add_output("NewId")
        command.add_return_value()

        self.assertEqual([p.name for p in command], ["Total", "NewId", RETURN_VALUE_NAME])
        self.assertEqual(len(command), 3)
        self.assertEqual([p.name for p in command.input_parameters], ["Total"])
        self.assertEqual([p.name for p in command.output_parameters], ["NewId"])
        self.assertTrue(command.has_outputs)

    def test_lookup_ignores_case(self) -> None:
        command = ProcedureCommand("p", [ProcedureParameter("Id", 5)])

        self.assertIn("id", command)
        self.assertEqual(command.value_of("ID"), 5)
        self.assertNotIn(5, command)

    def test_unknown_parameter_raises_key_error(self) -> None:
        command = ProcedureCommand("dbo.Order_Insert")

        with self.assertRaises(KeyError):
            command.value_of("NewId")

    def test_duplicate_and_empty_names_are_rejected(self) -> None:
        command = ProcedureCommand("p")
        command.add_input("Id", 1)

        with self.assertRaises(ValueError):
            command.add_input("ID", 2)
        with self.assertRaises(ValueError):
            command.add_input("", 2)

    def test_only_one_return_value(self) -> None:
        command = ProcedureCommand("p")
        command.add_return_value()

        with self.assertRaises(ValueError):
            command.add(ProcedureParameter("rc", direction=ParameterDirection.RETURN_VALUE))

    def test_return_value_defaults_to_none(self) -> None:
        command = ProcedureCommand("p")
        self.assertIsNone(command.return_value)
        self.assertFalse(command.has_outputs)

        command.add_return_value()
        self.assertIsNone(command.return_value)
        self.assertTrue(command.has_outputs)

    def test_apply_outputs_matches_columns_ignoring_case(self) -> None:
        command = ProcedureCommand("p")
        command.add_input("Total", 42)
        command.add_output("NewId")
        command.add_input_output("Version", 1)
        command.add_return_value()

        command.apply_outputs({"newid": 9, "VERSION": 2, RETURN_VALUE_NAME: 1})

        self.assertEqual(command.value_of("NewId"), 9)
        self.assertEqual(command.value_of("Version"), 2)
        self.assertEqual(command.return_value, 1)
        self.assertEqual(command.value_of("Total"), 42)

    def test_apply_outputs_without_row_clears_outputs(self) -> None:
        command = ProcedureCommand("p")
        command.add_input_output("Version", 1)
        command.add_return_value()

        command.apply_outputs(None)

        self.assertIsNone(command.value_of("Version"))
        self.assertIsNone(command.return_value)


class OutcomeTests(unittest.TestCase):
    def test_success_code_is_exactly_integer_one(self) -> None:
        self.assertTrue(is_success_code(1))
        for value in (0, -1, 2, None, True, 1.0, "1", Decimal(1)):
            with self.subTest(value=value):
                self.assertFalse(is_success_code(value))

    def test_coerce_identity(self) -> None:
        self.assertIsNone(coerce_identity(None))
        self.assertIsNone(coerce_identity(True))
        self.assertEqual(coerce_identity(7), 7)
        self.assertEqual(coerce_identity(Decimal("7")), 7)
        self.assertEqual(coerce_identity(7.0), 7)
        self.assertEqual(coerce_identity("7"), 7)

    def test_coerce_identity_rejects_non_integers(self) -> None:
        with self.assertRaises(ValueError):
            coerce_identity(Decimal("7.5"))
        with self.assertRaises(ValueError):
            coerce_identity("seven")
        with self.assertRaises(TypeError):
            coerce_identity(object())

    def test_new_identity_requires_positive_value(self) -> None:
        self.assertEqual(new_identity(3), 3)
        self.assertIsNone(new_identity(0))
        self.assertIsNone(new_identity(-4))
        self.assertIsNone(new_identity(None))
