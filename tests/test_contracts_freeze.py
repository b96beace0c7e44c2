import unittest

from src.automerge.catalog import build_new_package_catalog
from src.automerge.contracts import CONTRACT_VERSIONS, validate_catalog_freeze
from src.automerge.guidelines import Applicability, GuidelineCatalog, GuidelineSlot, Phase
from src.automerge.predicates import always_pass


class TestCatalogFreeze(unittest.TestCase):
    def test_contract_versions_are_frozen(self):
        self.assertEqual(CONTRACT_VERSIONS, {"new_package_catalog": "v1", "status_context": "v1"})

    def test_default_catalog_is_valid(self):
        result = validate_catalog_freeze(build_new_package_catalog())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])

    def test_retiring_a_slot_by_removal_is_detected(self):
        slots = [s for s in build_new_package_catalog() if s.index != 6]
        result = validate_catalog_freeze(GuidelineCatalog(slots))
        self.assertFalse(result.is_valid)
        self.assertIn("missing_slots:[6]", result.errors)

    def test_applicability_change_is_detected(self):
        slots = [
            GuidelineSlot(s.index, s.name, Applicability.ALWAYS, s.phase, always_pass) if s.index == 2 else s
            for s in build_new_package_catalog()
        ]
        result = validate_catalog_freeze(GuidelineCatalog(slots))
        self.assertIn("applicability_changed:2:always", result.errors)

    def test_extra_slot_is_detected(self):
        slots = list(build_new_package_catalog()) + [
            GuidelineSlot(14, "new", Applicability.ALWAYS, Phase.STATIC, always_pass)
        ]
        result = validate_catalog_freeze(GuidelineCatalog(slots))
        self.assertIn("unexpected_slots:[14]", result.errors)


if __name__ == "__main__":
    unittest.main()
