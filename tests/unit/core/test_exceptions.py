"""Tests for the soilprofiles exception hierarchy and validation helpers."""

import logging

import pytest

from soilprofiles.core.exceptions import (
    ConfigurationError,
    ConfigValidationError,
    EmptySelectionError,
    InsufficientDataError,
    InvalidDepthLogicError,
    MissingProfileLinkError,
    ProfileApplyError,
    ShapeMismatchError,
    SoilProfilesError,
    ValidationError,
    require,
    require_not_none,
    soilprofiles_error_handler,
)

pytestmark = [pytest.mark.unit]


class TestHierarchyRoots:
    """All custom exceptions must be rooted under SoilProfilesError."""

    @pytest.mark.parametrize("exc_cls", [
        ConfigurationError,
        ConfigValidationError,
        ValidationError,
        InvalidDepthLogicError,
        MissingProfileLinkError,
        ShapeMismatchError,
        EmptySelectionError,
        InsufficientDataError,
        ProfileApplyError,
    ])
    def test_all_exceptions_subclass_base(self, exc_cls):
        assert issubclass(exc_cls, SoilProfilesError), (
            f"{exc_cls.__name__} is not a subclass of SoilProfilesError"
        )

    def test_base_subclasses_exception(self):
        assert issubclass(SoilProfilesError, Exception)


class TestDomainParenting:

    def test_config_validation_error_under_configuration(self):
        assert issubclass(ConfigValidationError, ConfigurationError)

    def test_depth_logic_error_under_validation(self):
        assert issubclass(InvalidDepthLogicError, ValidationError)

    def test_missing_link_error_under_validation(self):
        assert issubclass(MissingProfileLinkError, ValidationError)


class TestExceptionAttributes:

    def test_depth_logic_error_carries_location(self):
        err = InvalidDepthLogicError("bad", profile_ids=['A'], horizon_indices={'A': [0, 2]})
        assert err.profile_ids == ['A']
        assert err.horizon_indices == {'A': [0, 2]}
        assert str(err) == "bad"

    def test_depth_logic_error_defaults_empty(self):
        err = InvalidDepthLogicError("bad")
        assert err.profile_ids == []
        assert err.horizon_indices == {}

    def test_shape_mismatch_error_attributes(self):
        err = ShapeMismatchError("shape", profile_id='P1', expected=3, actual=1)
        assert (err.profile_id, err.expected, err.actual) == ('P1', 3, 1)

    def test_profile_apply_error_attributes(self):
        assert ProfileApplyError("x", profile_id=7).profile_id == 7


# =============================================================================
# Helpers
# =============================================================================

class TestRequire:

    def test_passes_when_true(self):
        require(True, "never raised")

    def test_raises_validation_error_by_default(self):
        with pytest.raises(ValidationError, match="must be positive"):
            require(False, "must be positive")

    def test_custom_error_type(self):
        with pytest.raises(ConfigurationError):
            require(False, "bad config", error_type=ConfigurationError)

    def test_require_not_none_returns_value(self):
        assert require_not_none(0, "zero") == 0

    def test_require_not_none_raises(self):
        with pytest.raises(ValidationError, match="threshold must not be None"):
            require_not_none(None, "threshold")


class TestErrorHandler:

    def test_converts_generic_exceptions(self):
        with pytest.raises(SoilProfilesError, match="Failed during loading") as info:
            with soilprofiles_error_handler("loading"):
                raise KeyError("x")
        assert isinstance(info.value.__cause__, KeyError)

    def test_converts_to_requested_type(self):
        with pytest.raises(ConfigurationError):
            with soilprofiles_error_handler("parsing", error_type=ConfigurationError):
                raise ValueError("x")

    def test_passes_package_errors_through(self):
        with pytest.raises(EmptySelectionError):
            with soilprofiles_error_handler("selection"):
                raise EmptySelectionError("nothing")

    def test_logs_and_suppresses_without_reraise(self, caplog):
        logger = logging.getLogger("soilprofiles.test")
        with caplog.at_level(logging.ERROR, logger="soilprofiles.test"):
            with soilprofiles_error_handler("cleanup", logger, reraise=False):
                raise RuntimeError("boom")
        assert "Error during cleanup: boom" in caplog.text
