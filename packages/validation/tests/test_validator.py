"""
Tests for Validator: evaluation order, sync/async equivalence and cancellation.
"""

import asyncio
import threading

import pytest

from ruleknobs_common import ConfigurationError, OperationError
from ruleknobs_validation import (
    BatchedRule,
    StandaloneRule,
    ValidationSettings,
    Validator,
)

from sample_models import Order, User
from sample_validators import LooseValidator, OrderValidator, UserValidator

INVALID_USER_ERRORS = {
    "name": [
        "The name field cannot be empty.",
        "The name field must be at least 3 characters long.",
    ],
    "email": ["The email field must be a valid email address."],
    "age": [
        "The age field must not be zero.",
        "The age field must be a positive number.",
    ],
}


async def same_value(value, other):
    return value == other


class PasswordValidator(Validator[User]):
    def configure(self) -> None:
        (
            self.rule_for("password")
            .not_empty()
            .dependent_rule_async("confirm_password", same_value)
            .minimum_length(8)
        )


class TestModelDeclaration:
    """Test how validators learn the type they validate."""

    def test_model_from_generic_argument(self):
        """Test Validator[User] subclasses."""
        assert UserValidator.model is User

    def test_explicit_model_attribute(self):
        """Test the model class attribute."""
        assert OrderValidator.model is Order

    def test_no_model(self):
        """Test validators without a declared type."""
        assert LooseValidator.model is None
        assert Validator.model is None

    def test_model_is_inherited(self):
        """Test that subclasses of a typed validator keep its model."""
        class AdminValidator(UserValidator):
            pass

        assert AdminValidator.model is User

    def test_unknown_property_rejected_in_configure(self):
        """Test that declaring a rule on a missing property fails construction."""
        class BrokenValidator(Validator[User]):
            def configure(self) -> None:
                self.rule_for("nickname").not_null()

        with pytest.raises(ConfigurationError):
            BrokenValidator()

    def test_repr(self):
        """Test the debug representation."""
        assert repr(UserValidator()) == "UserValidator(model=User, rules=3)"


class TestValidate:
    """Test synchronous validation."""

    def test_invalid_user(self):
        """Test that every failing check is reported, grouped by property."""
        result = UserValidator().validate(User(name="", email="correo-invalido", age=0))

        assert result.is_valid is False
        assert result.errors == INVALID_USER_ERRORS
        assert list(result.errors) == ["name", "email", "age"]

    def test_valid_user(self):
        """Test a user passing every check."""
        result = UserValidator().validate(User(name="Ana", email="ana@example.com", age=30))

        assert result.is_valid is True
        assert result.errors == {}

    def test_null_name(self):
        """Test a null value failing the presence and length checks."""
        result = UserValidator().validate(User(name=None, email="ana@example.com", age=30))

        assert result.errors == {
            "name": [
                "The name field cannot be null.",
                "The name field cannot be empty.",
                "The name field must be at least 3 characters long.",
            ]
        }

    def test_validate_is_repeatable(self):
        """Test that validating twice yields equal results."""
        validator = UserValidator()
        user = User(name="", email="correo-invalido", age=0)

        assert validator.validate(user) == validator.validate(user)

    def test_mapping_instances(self):
        """Test validating plain mappings."""
        validator = LooseValidator()

        assert validator.validate({"anything": 1}).is_valid
        assert validator.validate({}).errors == {
            "anything": ["The anything field cannot be null."]
        }

    def test_no_rules(self):
        """Test that a validator without rules accepts anything."""
        assert Validator().validate(object()).is_valid

    def test_evaluation_fault_propagates(self):
        """Test that a comparison between incompatible types raises."""
        validator = Validator()
        validator.rule_for("age").greater_than("ten")

        with pytest.raises(TypeError):
            validator.validate({"age": 5})

    def test_missing_attribute_propagates(self):
        """Test that reading a missing attribute raises."""
        validator = Validator()
        validator.rule_for("nickname").not_null()

        with pytest.raises(AttributeError):
            validator.validate(User())


class TestAsyncRules:
    """Test asynchronous and dependent rules."""

    def test_dependent_rule_between_sync_checks(self):
        """Test that the batched rule runs before the dependent rule."""
        validator = PasswordValidator()
        assert [type(rule) for rule in validator.rules] == [BatchedRule, StandaloneRule]

        result = validator.validate(User(password="", confirm_password="x"))
        assert result.errors == {
            "password": [
                "The password field cannot be empty.",
                "The password field must be at least 8 characters long.",
                "The field password does not meet the dependent condition of confirm_password.",
            ]
        }

    def test_dependent_rule_passes(self):
        """Test matching dependent values."""
        user = User(password="s3cret-pass", confirm_password="s3cret-pass")
        assert PasswordValidator().validate(user).is_valid

    def test_must_async(self):
        """Test an asynchronous check through validate()."""
        async def is_unique(value):
            await asyncio.sleep(0)
            return value != "taken"

        validator = Validator()
        validator.rule_for("username").must_async(is_unique)

        assert validator.validate({"username": "free"}).is_valid
        assert validator.validate({"username": "taken"}).errors == {
            "username": ["The field username does not meet the specified condition."]
        }

    def test_must_async_custom_message(self):
        """Test the message override on asynchronous checks."""
        async def never(value):
            return False

        validator = Validator()
        validator.rule_for("username").must_async(never, message="Username taken")

        assert validator.validate({"username": "x"}).errors == {"username": ["Username taken"]}

    def test_empty_custom_message_is_kept(self):
        """Test that an explicit empty message is not replaced by the default."""
        async def never(value, other=None):
            return False

        validator = Validator()
        validator.rule_for("username").must_async(never, message="")
        validator.rule_for("password").dependent_rule_async("username", never, message="")

        assert validator.validate({"username": "x"}).errors == {
            "username": [""],
            "password": [""],
        }

    def test_plain_function_returning_bool(self):
        """Test that an async check may return a bool directly."""
        validator = Validator()
        validator.rule_for("username").must_async(lambda value: value == "ok")

        assert validator.validate({"username": "ok"}).is_valid
        assert not validator.validate({"username": "no"}).is_valid

    def test_errors_keyed_under_declaring_property(self):
        """Test that dependent errors go to the builder's property."""
        validator = Validator()
        validator.rule_for("confirm_password").dependent_rule_async("password", same_value)
        validator.rule_for("password").not_empty()

        result = validator.validate({"password": "", "confirm_password": "x"})
        assert list(result.errors) == ["confirm_password", "password"]

    def test_async_fault_propagates(self):
        """Test that an exception raised by an async check surfaces."""
        async def broken(value):
            raise ValueError("lookup failed")

        validator = Validator()
        validator.rule_for("username").must_async(broken)

        with pytest.raises(ValueError, match="lookup failed"):
            validator.validate({"username": "x"})


class TestValidateAsync:
    """Test asynchronous validation and its equivalence with validate()."""

    @pytest.mark.asyncio
    async def test_invalid_user(self):
        """Test the same scenario as the synchronous path."""
        result = await UserValidator().validate_async(
            User(name="", email="correo-invalido", age=0)
        )
        assert result.errors == INVALID_USER_ERRORS

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user",
        [
            User(name="", email="correo-invalido", age=0),
            User(name="Ana", email="ana@example.com", age=30),
            User(name=None, email=None, age=-3),
        ],
    )
    async def test_matches_sync_result(self, user):
        """Test that both paths produce equal results."""
        sync_result = await asyncio.to_thread(UserValidator().validate, user)
        async_result = await UserValidator().validate_async(user)

        assert async_result == sync_result
        assert list(async_result.errors) == list(sync_result.errors)

    @pytest.mark.asyncio
    async def test_dependent_rule_order(self):
        """Test batched and dependent rule ordering on the async path."""
        result = await PasswordValidator().validate_async(
            User(password="", confirm_password="x")
        )
        assert result.errors["password"][-1] == (
            "The field password does not meet the dependent condition of confirm_password."
        )
        assert len(result.errors["password"]) == 3

    @pytest.mark.asyncio
    async def test_async_fault_propagates(self):
        """Test that an exception raised by an async check surfaces."""
        async def broken(value):
            raise ValueError("lookup failed")

        validator = Validator()
        validator.rule_for("username").must_async(broken)

        with pytest.raises(ValueError):
            await validator.validate_async({"username": "x"})


class TestValidateInsideEventLoop:
    """Test validate() called from a coroutine."""

    @pytest.mark.asyncio
    async def test_resolves_on_worker_thread(self):
        """Test that async rules still run when a loop is active."""
        async def never(value):
            return False

        validator = Validator()
        validator.rule_for("username").must_async(never)

        result = validator.validate({"username": "x"})
        assert result.errors == {
            "username": ["The field username does not meet the specified condition."]
        }

    @pytest.mark.asyncio
    async def test_blocking_disallowed(self):
        """Test that the worker-thread fallback can be turned off."""
        async def never(value):
            return False

        validator = Validator(settings=ValidationSettings(allow_blocking_in_loop=False))
        validator.rule_for("username").must_async(never)

        with pytest.raises(OperationError):
            validator.validate({"username": "x"})

    @pytest.mark.asyncio
    async def test_sync_rules_unaffected(self):
        """Test that purely synchronous validators never need the fallback."""
        validator = UserValidator(settings=ValidationSettings(allow_blocking_in_loop=False))

        result = validator.validate(User(name="", email="correo-invalido", age=0))
        assert result.errors == INVALID_USER_ERRORS


class TestCancellation:
    """Test stopping a validation part way."""

    def test_cancelled_before_start(self):
        """Test that a set signal skips every rule."""
        cancel = threading.Event()
        cancel.set()

        result = UserValidator().validate(User(name="", age=0), cancel=cancel)
        assert result.is_valid
        assert result.errors == {}

    def test_unset_signal_runs_everything(self):
        """Test that an unset signal changes nothing."""
        result = UserValidator().validate(
            User(name="", email="correo-invalido", age=0), cancel=threading.Event()
        )
        assert result.errors == INVALID_USER_ERRORS

    def test_partial_result(self):
        """Test that rules already run keep their errors."""
        cancel = threading.Event()

        async def cancel_now(value):
            cancel.set()
            return False

        validator = Validator()
        validator.rule_for("name").not_null()
        validator.rule_for("name").must_async(cancel_now)
        validator.rule_for("email").not_null()

        result = validator.validate({}, cancel=cancel)
        assert result.errors == {
            "name": [
                "The name field cannot be null.",
                "The field name does not meet the specified condition.",
            ]
        }

    @pytest.mark.asyncio
    async def test_partial_result_async(self):
        """Test cancellation on the async path with an asyncio.Event."""
        cancel = asyncio.Event()

        async def cancel_now(value):
            cancel.set()
            return True

        validator = Validator()
        validator.rule_for("name").must_async(cancel_now)
        validator.rule_for("email").not_null()

        result = await validator.validate_async({}, cancel=cancel)
        assert result.is_valid
