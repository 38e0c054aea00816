"""Unit tests for domain exceptions."""

import pytest

from wirebox.domain.exceptions import (
    CircularAliasError,
    CircularDependencyError,
    DIException,
    MissingMethodError,
    NotInstantiableError,
    UnresolvableDependencyError,
    describe,
)


class TestDIException:
    """Test cases for the base DIException class."""

    def test_di_exception_is_exception(self):
        """Test that DIException inherits from Exception."""
        assert issubclass(DIException, Exception)

    def test_di_exception_can_be_raised(self):
        """Test that DIException can be raised with a message."""
        with pytest.raises(DIException, match="Test error"):
            raise DIException("Test error")

    @pytest.mark.parametrize(
        "exception_class",
        [
            NotInstantiableError,
            UnresolvableDependencyError,
            MissingMethodError,
            CircularDependencyError,
            CircularAliasError,
        ],
    )
    def test_all_errors_inherit_from_di_exception(self, exception_class):
        """Test that every container error can be caught as DIException."""
        assert issubclass(exception_class, DIException)


class TestDescribe:
    """Test cases for identifier descriptions."""

    def test_describe_class_uses_name(self):
        class Mailer:
            pass

        assert describe(Mailer) == "Mailer"

    def test_describe_string_is_unchanged(self):
        assert describe("app.mail.Mailer") == "app.mail.Mailer"


class TestNotInstantiableError:
    """Test cases for the NotInstantiableError class."""

    def test_message_without_build_stack(self):
        """Test message when nothing else was being built."""

        class Repository:
            pass

        error = NotInstantiableError(Repository)
        assert str(error) == "Target [Repository] is not instantiable."
        assert error.concrete is Repository
        assert error.build_stack == []

    def test_message_includes_build_stack(self):
        """Test that the message lists the consumers being built."""

        class Controller:
            pass

        class Service:
            pass

        error = NotInstantiableError("Repository", [Controller, Service])
        assert str(error) == "Target [Repository] is not instantiable while building [Controller, Service]."
        assert error.build_stack == [Controller, Service]

    def test_build_stack_is_copied(self):
        """Test that later stack changes do not alter the error."""
        stack = ["A"]
        error = NotInstantiableError("B", stack)
        stack.append("C")
        assert error.build_stack == ["A"]


class TestUnresolvableDependencyError:
    """Test cases for the UnresolvableDependencyError class."""

    def test_message_names_parameter_and_class(self):
        class ReportService:
            pass

        error = UnresolvableDependencyError("page_size", ReportService)
        assert str(error) == "Unresolvable dependency resolving [page_size] in class ReportService"
        assert error.parameter == "page_size"
        assert error.declaring is ReportService


class TestMissingMethodError:
    """Test cases for the MissingMethodError class."""

    def test_message_names_target(self):
        error = MissingMethodError("ReportService")
        assert "ReportService" in str(error)
        assert error.target == "ReportService"


class TestCircularDependencyError:
    """Test cases for the CircularDependencyError class."""

    def test_circular_dependency_error_with_simple_chain(self):
        """Test CircularDependencyError with a simple dependency chain."""

        class ServiceA:
            pass

        class ServiceB:
            pass

        error = CircularDependencyError([ServiceA, ServiceB, ServiceA])
        assert str(error) == "Circular dependency detected: ServiceA -> ServiceB -> ServiceA"
        assert error.dependency_chain == [ServiceA, ServiceB, ServiceA]

    def test_circular_dependency_error_with_self_reference(self):
        """Test CircularDependencyError when a class depends on itself."""
        error = CircularDependencyError(["node", "node"])
        assert str(error) == "Circular dependency detected: node -> node"


class TestCircularAliasError:
    """Test cases for the CircularAliasError class."""

    def test_message_lists_alias_chain(self):
        error = CircularAliasError(["a", "b", "a"])
        assert str(error) == "Circular alias detected: a -> b -> a"
        assert error.alias_chain == ["a", "b", "a"]
