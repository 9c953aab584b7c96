"""
Tests for copy-number naming.
"""
from dripdesk_ui.naming import next_copy_email, next_copy_name, strip_copy_suffix


class TestCopyName:

    def test_first_copy(self):
        assert next_copy_name("Welcome", []) == "Welcome (Copy)"

    def test_existing_plain_copy_counts_as_one(self):
        assert next_copy_name("Welcome", ["Welcome", "Welcome (Copy)"]) == "Welcome (Copy 2)"

    def test_copy_of_a_copy_uses_the_base_name(self):
        existing = ["Welcome", "Welcome (Copy)", "Welcome (Copy 4)", "Other (Copy 9)"]
        assert next_copy_name("Welcome (Copy 4)", existing) == "Welcome (Copy 5)"

    def test_similar_names_are_not_copies(self):
        assert next_copy_name("Welcome", ["Welcome back (Copy 3)"]) == "Welcome (Copy)"

    def test_strip_copy_suffix(self):
        assert strip_copy_suffix("Spring Sale (Copy 12)") == "Spring Sale"
        assert strip_copy_suffix("Spring Sale (Copy)") == "Spring Sale"
        assert strip_copy_suffix("(Copy) Spring Sale") == "(Copy) Spring Sale"


class TestCopyEmail:

    def test_first_copy(self):
        assert next_copy_email("jane@acme.test", ["jane@acme.test"]) == "jane.copy@acme.test"

    def test_next_number(self):
        existing = ["jane@acme.test", "jane.copy@acme.test"]
        assert next_copy_email("jane@acme.test", existing) == "jane.copy2@acme.test"

    def test_copy_of_a_copy(self):
        existing = ["jane.copy@acme.test", "jane.copy2@acme.test", "jane.copy7@other.test"]
        assert next_copy_email("jane.copy2@acme.test", existing) == "jane.copy3@acme.test"

    def test_blank_email_stays_blank(self):
        assert next_copy_email(None, ["jane@acme.test"]) == ""
        assert next_copy_email("", []) == ""

    def test_value_without_at_sign(self):
        assert next_copy_email("jane", []) == "jane.copy"
        assert next_copy_email("jane.copy", ["jane", "jane.copy"]) == "jane.copy2"
