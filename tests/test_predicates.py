import unittest

from src.automerge import predicates
from src.automerge.exemptions import AuthorizationConfig, ExemptionDecision
from src.automerge.guidelines import GuidelineContext
from src.automerge.registry import InMemoryRegistry, StaticProbe
from src.automerge.submission import Submission

AUTH = AuthorizationConfig.from_lists(["registrator"], ["jlbuild"])


def make_ctx(package="Foobar", version="1.0.0", author="registrator", changed_files=None, **registry):
    if changed_files is None:
        letter = package[0].upper()
        changed_files = ["Registry.toml"] + [
            f"{letter}/{package}/{name}" for name in ("Compat.toml", "Deps.toml", "Package.toml", "Versions.toml")
        ]
    sub = Submission(
        number=1,
        title=f"Register {package} {version}",
        package=package,
        version=version,
        head_sha="sha1",
        author=author,
        is_open=True,
        changed_files=tuple(changed_files),
    )
    registry.setdefault("packages", frozenset({"Example", "JSON"}))
    return GuidelineContext(
        submission=sub,
        registry=InMemoryRegistry(**registry),
        exemption=ExemptionDecision(granted_special_exemption=False),
        auth=AUTH,
    )


class TestNamePredicates(unittest.TestCase):
    def test_capitalization(self):
        self.assertTrue(predicates.meets_normal_capitalization(make_ctx("Foobar"))[0])
        self.assertTrue(predicates.meets_normal_capitalization(make_ctx("Foobar2"))[0])
        for bad in ("foobar", "FOOBAR", "Foo-bar"):
            with self.subTest(name=bad):
                ok, msg = predicates.meets_normal_capitalization(make_ctx(bad))
                self.assertFalse(ok)
                self.assertTrue(msg)

    def test_length(self):
        self.assertTrue(predicates.meets_name_length(make_ctx("Fooba"))[0])
        ok, msg = predicates.meets_name_length(make_ctx("Fo"))
        self.assertFalse(ok)
        self.assertEqual(msg, "Name is not at least 5 characters long.")

    def test_reserved_name(self):
        self.assertTrue(predicates.meets_reserved_name_check(make_ctx("Foobar"))[0])
        self.assertFalse(predicates.meets_reserved_name_check(make_ctx("MyJuliaTools"))[0])
        self.assertFalse(predicates.meets_reserved_name_check(make_ctx("Jupyter"))[0])

    def test_ascii(self):
        self.assertTrue(predicates.meets_name_ascii(make_ctx("Foobar"))[0])
        self.assertFalse(predicates.meets_name_ascii(make_ctx("Föobar"))[0])

    def test_distance_ignores_autogenerated_names(self):
        ctx = make_ctx("Zlibs", packages=frozenset({"Zlib_jll", "Example"}))
        self.assertTrue(predicates.meets_distance_from_existing_names(ctx)[0])
        ctx = make_ctx("Exampel", packages=frozenset({"Example"}))
        self.assertFalse(predicates.meets_distance_from_existing_names(ctx)[0])


class TestAuthorization(unittest.TestCase):
    def test_general_author_passes(self):
        self.assertTrue(predicates.meets_author_authorization(make_ctx(author="registrator"))[0])

    def test_narrow_author_on_normal_package_fails(self):
        ok, msg = predicates.meets_author_authorization(make_ctx(author="jlbuild"))
        self.assertFalse(ok)
        self.assertIn("not authorized", msg)

    def test_narrow_author_on_autogenerated_package_passes(self):
        self.assertTrue(predicates.meets_author_authorization(make_ctx("Zlib_jll", author="jlbuild"))[0])


class TestAllowedFiles(unittest.TestCase):
    def test_registry_entry_files_pass(self):
        self.assertTrue(predicates.meets_allowed_files(make_ctx())[0])

    def test_subset_passes(self):
        self.assertTrue(predicates.meets_allowed_files(make_ctx(changed_files=["F/Foobar/Package.toml"]))[0])

    def test_other_files_fail(self):
        ok, msg = predicates.meets_allowed_files(
            make_ctx(changed_files=["Registry.toml", "E/Example/Versions.toml"])
        )
        self.assertFalse(ok)
        self.assertIn("E/Example/Versions.toml", msg)

    def test_no_files_fail(self):
        self.assertFalse(predicates.meets_allowed_files(make_ctx(changed_files=[]))[0])


class TestCompat(unittest.TestCase):
    def ctx(self, deps, compat):
        return make_ctx(
            deps={"Foobar": {"1.0.0": tuple(deps)}},
            compat_entries={"Foobar": {"1.0.0": compat}},
            stdlibs=frozenset({"LinearAlgebra", "Pkg", "Libdl"}),
        )

    def test_all_bounded(self):
        ok, msg = predicates.meets_compat_for_all_deps(
            self.ctx(["JSON", "LinearAlgebra", "Zlib_jll"], {"julia": "1.6", "JSON": "0.21, 0.22"})
        )
        self.assertTrue(ok, msg)

    def test_missing_language_entry(self):
        ok, msg = predicates.meets_compat_for_all_deps(self.ctx([], {}))
        self.assertFalse(ok)
        self.assertIn("`julia`", msg)

    def test_missing_dependency_entry(self):
        ok, msg = predicates.meets_compat_for_all_deps(self.ctx(["JSON"], {"julia": "1"}))
        self.assertFalse(ok)
        self.assertIn("`JSON`", msg)

    def test_unbounded_entries(self):
        for entry in ("*", ">= 0.21", "0.21, >=1"):
            with self.subTest(entry=entry):
                ok, msg = predicates.meets_compat_for_all_deps(self.ctx(["JSON"], {"julia": "1", "JSON": entry}))
                self.assertFalse(ok)
                self.assertIn("no upper bound", msg)


class TestAutogeneratedDependencies(unittest.TestCase):
    def test_allowed_set(self):
        ctx = make_ctx("Zlib_jll", deps={"Zlib_jll": {"1.0.0": ("Pkg", "Libdl", "Other_jll")}})
        self.assertTrue(predicates.meets_allowed_autogenerated_dependencies(ctx)[0])

    def test_disallowed_dependency(self):
        ctx = make_ctx("Zlib_jll", deps={"Zlib_jll": {"1.0.0": ("Pkg", "JSON")}})
        ok, msg = predicates.meets_allowed_autogenerated_dependencies(ctx)
        self.assertFalse(ok)
        self.assertIn("JSON", msg)


class TestProbes(unittest.TestCase):
    def test_install_and_load_delegate_to_registry(self):
        ctx = make_ctx(
            install_probe=StaticProbe("installed", {"Foobar@1.0.0": "unsatisfiable requirements"}),
        )
        ok, msg = predicates.meets_version_can_be_installed(ctx)
        self.assertFalse(ok)
        self.assertIn("unsatisfiable requirements", msg)
        self.assertEqual(predicates.meets_version_can_be_loaded(ctx), (True, ""))


if __name__ == "__main__":
    unittest.main()
