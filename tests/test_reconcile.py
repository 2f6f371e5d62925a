"""Tests for the reconciliation guard: diff, drift report, guard, mutations."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from vcspatch.models.vcs_root import AnonymousAuth, PasswordAuth, VcsRootConfig
from vcspatch.reconcile.diff import FieldDiff, diff_configs
from vcspatch.reconcile.errors import (
    ConfigurationDriftError,
    IdentifierMismatchError,
    ImmutableFieldError,
    PatchError,
)
from vcspatch.reconcile.guard import check_drift, reconcile
from vcspatch.reconcile.mutations import chain, replace_auth, set_fields
from vcspatch.reconcile.report import DriftReport

ROOT_UUID = "ab4bf3e6-1be4-4ce4-bc3d-6c4b39361eed"
TOKEN_REF = "%github.bot-teamcity.token%"
CREDENTIALS_REF = "credentialsJSON:ecc6ec89-b940-4699-a466-cec87f0285da"


def _root(**overrides) -> VcsRootConfig:
    """The DistributedTest VCS root, with optional field overrides."""
    data = dict(
        uuid=ROOT_UUID,
        id="DistributedTest_DistributedTest",
        name="DistributedTest",
        url="https://github.com/gradle/gradle.git",
        branch="refs/heads/blindpirate/distributed-test",
        auth_method=PasswordAuth(user_name="bot-teamcity", password=TOKEN_REF),
    )
    data.update(overrides)
    return VcsRootConfig(**data)


SWAP_TO_CREDENTIALS = replace_auth(
    PasswordAuth(user_name="bot-teamcity", password=CREDENTIALS_REF)
)


# ── diff_configs ─────────────────────────────────────────────────────────────

class TestDiffConfigs:

    def test_equal_configs_have_no_diff(self):
        assert diff_configs(_root(), _root()) == []

    def test_single_field_diff(self):
        diffs = diff_configs(_root(branch="refs/heads/master"), _root())
        assert len(diffs) == 1
        assert diffs[0].path == "branch"
        assert diffs[0].actual == "refs/heads/master"
        assert diffs[0].expected == "refs/heads/blindpirate/distributed-test"

    def test_nested_auth_field_diff(self):
        current = _root(auth_method=PasswordAuth(user_name="bot-teamcity", password="other"))
        diffs = diff_configs(current, _root())
        assert [d.path for d in diffs] == ["auth_method.password"]

    def test_auth_method_change_reports_method_first(self):
        diffs = diff_configs(_root(auth_method=AnonymousAuth()), _root())
        paths = [d.path for d in diffs]
        assert paths[0] == "auth_method.method"
        assert "auth_method.user_name" in paths
        assert "auth_method.password" in paths
        password_diff = next(d for d in diffs if d.path == "auth_method.password")
        assert password_diff.actual is None
        assert password_diff.expected == TOKEN_REF

    def test_diffs_follow_field_order(self):
        current = _root(name="Renamed", url="https://example.com/repo.git", branch_spec="+:*")
        paths = [d.path for d in diff_configs(current, _root())]
        assert paths == ["name", "url", "branch_spec"]


class TestFieldDiff:

    def test_secret_detection(self):
        assert FieldDiff(path="auth_method.password").is_secret is True
        assert FieldDiff(path="branch").is_secret is False

    def test_describe_masks_secret(self):
        d = FieldDiff(path="auth_method.password", expected=TOKEN_REF, actual="hunter2")
        text = d.describe()
        assert "hunter2" not in text
        assert TOKEN_REF not in text
        assert "auth_method.password" in text

    def test_describe_unmasked(self):
        d = FieldDiff(path="auth_method.password", expected=TOKEN_REF, actual="hunter2")
        text = d.describe(mask_secrets=False)
        assert "hunter2" in text
        assert TOKEN_REF in text

    def test_describe_plain_field(self):
        d = FieldDiff(path="branch", expected="refs/heads/a", actual="refs/heads/b")
        assert d.describe() == "branch: expected 'refs/heads/a', actual 'refs/heads/b'"


# ── DriftReport ──────────────────────────────────────────────────────────────

class TestDriftReport:

    def test_check_drift_in_sync(self):
        report = check_drift(_root(), _root())
        assert isinstance(report, DriftReport)
        assert report.has_drift is False
        assert report.vcs_root_uuid == ROOT_UUID
        assert "match" in report.to_text()

    def test_check_drift_detects_branch(self):
        report = check_drift(_root(branch="refs/heads/master"), _root())
        assert report.has_drift is True
        text = report.to_text()
        assert "Unexpected VCS root settings" in text
        assert "DistributedTest_DistributedTest" in text
        assert "refs/heads/master" in text

    def test_markdown_masks_secrets(self):
        current = _root(auth_method=PasswordAuth(user_name="bot-teamcity", password="hunter2"))
        md = check_drift(current, _root()).to_markdown()
        assert "# Drift Report" in md
        assert "DRIFTED" in md
        assert "`auth_method.password`" in md
        assert "hunter2" not in md

    def test_markdown_unmasked_shows_values(self):
        current = _root(auth_method=PasswordAuth(user_name="bot-teamcity", password="hunter2"))
        md = check_drift(current, _root()).to_markdown(mask_secrets=False)
        assert "hunter2" in md


# ── reconcile ────────────────────────────────────────────────────────────────

class TestReconcile:

    def test_matching_config_is_mutated(self):
        result = reconcile(_root(), _root(), SWAP_TO_CREDENTIALS)
        assert result.auth_method == PasswordAuth(
            user_name="bot-teamcity", password=CREDENTIALS_REF
        )

    def test_other_fields_unchanged(self):
        original = _root()
        result = reconcile(original, _root(), SWAP_TO_CREDENTIALS)
        assert result.model_dump(exclude={"auth_method"}) == original.model_dump(
            exclude={"auth_method"}
        )
        assert result.auth_method.user_name == "bot-teamcity"

    def test_result_equals_mutation_of_current(self):
        current = _root()
        expected_result = SWAP_TO_CREDENTIALS(_root())
        assert reconcile(current, _root(), SWAP_TO_CREDENTIALS) == expected_result

    def test_current_is_not_modified_on_success(self):
        current = _root()
        reconcile(current, _root(), SWAP_TO_CREDENTIALS)
        assert current == _root()

    def test_branch_drift_raises(self):
        current = _root(branch="refs/heads/master")
        with pytest.raises(ConfigurationDriftError) as exc_info:
            reconcile(current, _root(), SWAP_TO_CREDENTIALS)
        assert exc_info.value.report.has_drift
        assert [d.path for d in exc_info.value.report.differences] == ["branch"]
        assert "branch" in str(exc_info.value)

    def test_drift_leaves_current_untouched(self):
        current = _root(branch="refs/heads/master")
        with pytest.raises(ConfigurationDriftError):
            reconcile(current, _root(), SWAP_TO_CREDENTIALS)
        assert current.auth_method.password == TOKEN_REF
        assert current.branch == "refs/heads/master"

    def test_mutation_not_called_on_drift(self):
        calls = []

        def mutation(config):
            calls.append(config)
            return config

        with pytest.raises(ConfigurationDriftError):
            reconcile(_root(name="Other"), _root(), mutation)
        assert calls == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"id": "Other_Id"},
            {"name": "Other"},
            {"url": "https://github.com/gradle/other.git"},
            {"branch": "refs/heads/master"},
            {"push_url": "git@github.com:gradle/gradle.git"},
            {"branch_spec": "+:refs/heads/*"},
            {"auth_method": PasswordAuth(user_name="someone", password=TOKEN_REF)},
            {"auth_method": AnonymousAuth()},
        ],
    )
    def test_any_single_field_difference_is_drift(self, overrides):
        with pytest.raises(ConfigurationDriftError):
            reconcile(_root(**overrides), _root(), SWAP_TO_CREDENTIALS)

    def test_uuid_mismatch(self):
        other = _root(uuid="00000000-0000-0000-0000-000000000000")
        with pytest.raises(IdentifierMismatchError) as exc_info:
            reconcile(_root(), other, SWAP_TO_CREDENTIALS)
        assert isinstance(exc_info.value, ConfigurationDriftError)
        assert exc_info.value.report.differences[0].path == "uuid"

    def test_drift_message_masks_secrets_by_default(self):
        current = _root(auth_method=PasswordAuth(user_name="bot-teamcity", password="hunter2"))
        with pytest.raises(ConfigurationDriftError) as exc_info:
            reconcile(current, _root(), SWAP_TO_CREDENTIALS)
        assert "hunter2" not in str(exc_info.value)

    def test_drift_message_unmasked_on_request(self):
        current = _root(auth_method=PasswordAuth(user_name="bot-teamcity", password="hunter2"))
        with pytest.raises(ConfigurationDriftError, match="hunter2"):
            reconcile(current, _root(), SWAP_TO_CREDENTIALS, mask_secrets=False)

    def test_idempotent_against_updated_expected(self):
        first = reconcile(_root(), _root(), SWAP_TO_CREDENTIALS)
        second = reconcile(first, first.model_copy(deep=True), SWAP_TO_CREDENTIALS)
        assert second == first

    def test_stale_expected_after_patch_is_drift(self):
        patched = reconcile(_root(), _root(), SWAP_TO_CREDENTIALS)
        with pytest.raises(ConfigurationDriftError) as exc_info:
            reconcile(patched, _root(), SWAP_TO_CREDENTIALS)
        assert [d.path for d in exc_info.value.report.differences] == ["auth_method.password"]
        assert CREDENTIALS_REF not in str(exc_info.value)

    def test_in_place_mutation_returning_none(self):
        def mutation(config):
            config.branch = "refs/heads/main"

        result = reconcile(_root(), _root(), mutation)
        assert result.branch == "refs/heads/main"

    def test_mutation_changing_uuid_rejected(self):
        def mutation(config):
            return config.model_copy(update={"uuid": "other"})

        with pytest.raises(ImmutableFieldError):
            reconcile(_root(), _root(), mutation)

    def test_mutation_returning_wrong_type(self):
        with pytest.raises(TypeError):
            reconcile(_root(), _root(), lambda config: {"branch": "x"})

    def test_result_is_revalidated(self):
        def mutation(config):
            return config.model_copy(update={"branch": 42})

        with pytest.raises(ValidationError):
            reconcile(_root(), _root(), mutation)

    def test_errors_share_base_class(self):
        assert issubclass(ConfigurationDriftError, PatchError)
        assert issubclass(ImmutableFieldError, PatchError)


# ── Mutations ────────────────────────────────────────────────────────────────

class TestMutations:

    def test_replace_auth_from_dict(self):
        mutation = replace_auth(
            {"method": "password", "user_name": "bot", "password": CREDENTIALS_REF}
        )
        result = mutation(_root())
        assert isinstance(result.auth_method, PasswordAuth)
        assert result.auth_method.password == CREDENTIALS_REF

    def test_replace_auth_rejects_unknown_method(self):
        with pytest.raises(ValidationError):
            replace_auth({"method": "oauth"})

    def test_set_fields(self):
        result = set_fields(branch="refs/heads/main", name="Main")(_root())
        assert result.branch == "refs/heads/main"
        assert result.name == "Main"

    def test_set_fields_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown"):
            set_fields(colour="blue")

    def test_set_fields_refuses_uuid(self):
        with pytest.raises(ValueError, match="uuid"):
            set_fields(uuid="other")

    def test_chain_applies_in_order(self):
        mutation = chain(
            set_fields(branch="refs/heads/a"),
            set_fields(branch="refs/heads/b"),
            SWAP_TO_CREDENTIALS,
        )
        result = reconcile(_root(), _root(), mutation)
        assert result.branch == "refs/heads/b"
        assert result.auth_method.password == CREDENTIALS_REF
