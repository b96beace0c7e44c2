from __future__ import annotations

from . import predicates
from .guidelines import Applicability, GuidelineCatalog, GuidelineSlot, Phase


def build_new_package_catalog() -> GuidelineCatalog:
    """The numbered new-package guidelines.

    Retired or unimplemented rules stay in the table as disabled slots so the
    numbering reported to authors never shifts.
    """
    A = Applicability
    S, D = Phase.STATIC, Phase.DYNAMIC
    return GuidelineCatalog(
        [
            GuidelineSlot(0, "Only authorized authors register non-auto-generated packages", A.ALWAYS, S, predicates.meets_author_authorization),
            GuidelineSlot(1, "Only modifies the files that it's allowed to modify", A.ALWAYS, S, predicates.meets_allowed_files),
            GuidelineSlot(2, "Registry.toml changes only add this package", A.DISABLED, S, predicates.always_pass),
            GuidelineSlot(3, "Normal capitalization", A.UNLESS_EXEMPT, S, predicates.meets_normal_capitalization),
            GuidelineSlot(4, "Name not too short", A.UNLESS_EXEMPT, S, predicates.meets_name_length),
            GuidelineSlot(5, "Name does not include the language name or start with its reserved prefix", A.ALWAYS, S, predicates.meets_reserved_name_check),
            GuidelineSlot(6, "Standard initial version number", A.DISABLED, S, predicates.always_pass),
            GuidelineSlot(7, "Repo URL ends with /name.jl.git", A.DISABLED, S, predicates.always_pass),
            GuidelineSlot(8, "Compat (with upper bound) for all dependencies", A.ALWAYS, S, predicates.meets_compat_for_all_deps),
            GuidelineSlot(9, "Auto-generated packages only depend on the allowed set", A.AUTOGENERATED_ONLY, S, predicates.meets_allowed_autogenerated_dependencies),
            GuidelineSlot(10, "Name is not too similar to existing package names", A.ALWAYS, S, predicates.meets_distance_from_existing_names),
            GuidelineSlot(11, "Name is composed of ASCII characters only", A.ALWAYS, S, predicates.meets_name_ascii),
            GuidelineSlot(12, "Version can be installed", A.ALWAYS, D, predicates.meets_version_can_be_installed),
            GuidelineSlot(13, "Version can be loaded", A.ALWAYS, D, predicates.meets_version_can_be_loaded),
        ]
    )
