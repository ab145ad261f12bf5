"""
Unit tests for bundle file naming and lookup.
"""
from autol10n.core.bundles import BundleCatalog, sanitize_tag


class TestSanitizeTag:
    """Tests for sanitize_tag"""

    def test_keeps_allowed_characters(self):
        assert sanitize_tag("pt_BR") == "pt_BR"
        assert sanitize_tag("zh-Hant") == "zh-Hant"

    def test_strips_everything_else(self):
        assert sanitize_tag("`fr`.\n") == "fr"
        assert sanitize_tag("../../etc") == "etc"


class TestBundleCatalog:
    """Tests for BundleCatalog"""

    def test_tag_from_filename(self, tmp_path):
        catalog = BundleCatalog(tmp_path)
        assert catalog.tag_from_filename("app_fr.arb") == "fr"
        assert catalog.tag_from_filename("app_pt_BR.arb") == "pt_BR"
        assert catalog.tag_from_filename("app_.arb") is None
        assert catalog.tag_from_filename("app_en.json") is None
        assert catalog.tag_from_filename("intl_en.arb") is None
        assert catalog.tag_from_filename("app_en.arb.bak") is None

    def test_list_tags_sorted_and_filtered(self, bundles_dir, write_bundle):
        write_bundle("fr", {})
        write_bundle("en", {})
        write_bundle("pt_BR", {})
        (bundles_dir / "app_en.arb.bak").write_text("{}", encoding="utf-8")
        (bundles_dir / "README.md").write_text("notes", encoding="utf-8")
        (bundles_dir / "app_de.arb").mkdir()

        assert BundleCatalog(bundles_dir).list_tags() == ["en", "fr", "pt_BR"]

    def test_custom_naming(self, tmp_path):
        (tmp_path / "strings-en.json").write_text("{}", encoding="utf-8")
        catalog = BundleCatalog(tmp_path, prefix="strings-", extension=".json")
        assert catalog.list_tags() == ["en"]
        assert catalog.path_for("fr") == tmp_path / "strings-fr.json"

    def test_read_missing_bundle_is_empty_object(self, bundles_dir):
        catalog = BundleCatalog(bundles_dir)
        assert catalog.read("de") == "{}"
        assert catalog.exists("de") is False

    def test_read_existing_bundle(self, bundles_dir, write_bundle):
        write_bundle("en", '{"greeting": "hi"}')
        catalog = BundleCatalog(bundles_dir)
        assert catalog.read("en") == '{"greeting": "hi"}'
        assert catalog.exists("en") is True
