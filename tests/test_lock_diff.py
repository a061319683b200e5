"""Tests for composer.lock package change detection."""

from conftest import lock

from maintenance_reporter.lock_diff import PackageChange, diff_locks, display_version


class TestDiffLocks:
    def test_updated_removed_and_new_packages(self):
        before = lock(("drupal/core", "10.1.0"), ("drupal/token", "1.13.0"), ("drupal/ctools", "4.0.0"))
        after = lock(("drupal/core", "10.1.6"), ("drupal/ctools", "4.0.0"), ("drupal/pathauto", "1.12.0"))
        diff = diff_locks(before, after)
        assert diff.changes == [
            PackageChange("drupal/core", "10.1.0", "10.1.6"),
            PackageChange("drupal/token", "1.13.0", "REMOVED"),
            PackageChange("drupal/pathauto", "NEW", "1.12.0"),
        ]
        assert diff.changes_dev == []

    def test_dev_section_is_separate(self):
        before = lock(dev=(("phpunit/phpunit", "9.6.0"),))
        after = lock(dev=(("phpunit/phpunit", "10.0.0"),))
        diff = diff_locks(before, after)
        assert diff.changes == []
        assert diff.changes_dev == [PackageChange("phpunit/phpunit", "9.6.0", "10.0.0")]

    def test_identical_locks(self):
        data = lock(("drupal/core", "10.1.0"))
        assert diff_locks(data, data).is_empty

    def test_branch_move_is_visible(self):
        before = {"packages": [{"name": "acme/lib", "version": "dev-main", "source": {"reference": "aaaaaaa111"}}]}
        after = {"packages": [{"name": "acme/lib", "version": "dev-main", "source": {"reference": "bbbbbbb222"}}]}
        assert diff_locks(before, after).changes == [
            PackageChange("acme/lib", "dev-main aaaaaaa", "dev-main bbbbbbb")
        ]


class TestDisplayVersion:
    def test_stable_version_unchanged(self):
        assert display_version({"version": "1.2.0", "source": {"reference": "abcdef123"}}) == "1.2.0"

    def test_branch_alias_gets_reference(self):
        assert display_version({"version": "2.x-dev", "source": {"reference": "abcdef123"}}) == "2.x-dev abcdef1"

    def test_dev_version_without_source(self):
        assert display_version({"version": "dev-main"}) == "dev-main"
