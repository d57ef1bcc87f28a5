"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers
within the Users bounded context.
"""

from pytest_archon import archrule


class TestUsersDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_outer_layers(self):
        """Domain objects should be usable without any other layer."""
        (
            archrule("domain_no_outer_layers")
            .match("users.domain*")
            .should_not_import(
                "users.application*",
                "users.infrastructure*",
                "users.presentation*",
                "users.dependencies*",
            )
            .check("users")
        )

    def test_domain_does_not_import_frameworks(self):
        """Domain layer should be framework-agnostic."""
        (
            archrule("domain_no_frameworks")
            .match("users.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*", "pydantic*")
            .check("users")
        )


class TestUsersPortsLayerBoundaries:
    """Tests that the ports layer has no forbidden dependencies."""

    def test_ports_does_not_import_implementations(self):
        """Ports define interfaces; they should not know their implementations."""
        (
            archrule("ports_no_implementations")
            .match("users.ports*")
            .should_not_import("users.infrastructure*", "users.application*")
            .check("users")
        )


class TestUsersApplicationLayerBoundaries:
    """Tests that the application layer has no forbidden dependencies."""

    def test_application_does_not_import_infrastructure(self):
        """Application services depend on ports, not on adapters."""
        (
            archrule("application_no_infrastructure")
            .match("users.application*")
            .should_not_import("users.infrastructure*", "infrastructure*")
            .check("users")
        )

    def test_application_does_not_import_fastapi(self):
        """Application layer should not depend on the web framework."""
        (
            archrule("application_no_fastapi")
            .match("users.application*")
            .should_not_import("fastapi*", "starlette*", "users.presentation*")
            .check("users")
        )


class TestSharedKernelBoundaries:
    def test_shared_kernel_does_not_import_bounded_contexts(self):
        """The shared kernel must not depend on any bounded context."""
        (
            archrule("shared_kernel_independent")
            .match("shared_kernel*")
            .should_not_import("users*", "infrastructure*")
            .check("shared_kernel")
        )
