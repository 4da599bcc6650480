"""Tests for keyword-based rule intent classification."""

from __future__ import annotations

import pytest

from statescope.core.rules import HardeningRule, Intent, classify_intent


def _rule(rule_id: str = "rule", check: str = "") -> HardeningRule:
    return HardeningRule(id=rule_id, title="T", check=check)


class TestClassifyIntent:
    """Tests for the intent keyword table."""

    @pytest.mark.parametrize(
        ("check", "intent"),
        [
            ("Block PUBLIC reads", Intent.PUBLIC_ACCESS),
            ("Data must be encrypted", Intent.ENCRYPTION),
            ("Enable versioning", Intent.VERSIONING),
            ("Enable access logs", Intent.LOGGING),
            ("Least privilege", Intent.PRIVILEGE),
            ("Keep backups", Intent.BACKUP),
            ("Enable deletion protection", Intent.DELETION),
            ("Require IMDSv2 for metadata", Intent.METADATA),
            ("Restrict CIDR ranges", Intent.RESTRICT),
        ],
    )
    def test_check_text_keywords(self, check: str, intent: Intent) -> None:
        assert intent in classify_intent(_rule(check=check))

    def test_id_keywords_are_case_sensitive(self) -> None:
        assert Intent.ENCRYPTION in classify_intent(_rule(rule_id="aws-ebs-encrypt"))
        assert Intent.ENCRYPTION not in classify_intent(_rule(rule_id="AWS-EBS-ENCRYPT"))

    def test_dangerous_port_from_id_only(self) -> None:
        assert Intent.DANGEROUS_PORT in classify_intent(_rule(rule_id="no-ssh-from-world"))
        assert Intent.DANGEROUS_PORT in classify_intent(_rule(rule_id="no-rdp"))
        assert Intent.DANGEROUS_PORT not in classify_intent(_rule(check="block ssh and rdp"))

    def test_include_id_false_ignores_id(self) -> None:
        rule = _rule(rule_id="aws-efs-encrypt", check="Ensure the file system is protected")
        assert classify_intent(rule, include_id=False) == frozenset()
        assert Intent.ENCRYPTION in classify_intent(rule)

    def test_over_matching_is_preserved(self) -> None:
        """'log' inside an unrelated word still selects the logging intent."""
        assert Intent.LOGGING in classify_intent(_rule(check="Use approved technology"))

    def test_no_keywords(self) -> None:
        assert classify_intent(_rule(rule_id="x", check="nothing here")) == frozenset()
