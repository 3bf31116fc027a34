"""Tests for warden.guard — PermissionGuard."""

import re

import pytest

from warden.guard import PermissionGuard
from warden.lifecycle import AccessGate
from warden.matching import PermissionRequirement
from warden.routes import RouteSpec

EXPORT = PermissionRequirement.of("report", "export")
MANAGE_SYS = PermissionRequirement.of(re.compile(r"^sys:"), "manage")


class TestPermissionGuard:
    def test_permissive_before_init(self, gate: AccessGate) -> None:
        guard = PermissionGuard(gate, [EXPORT], backup="nope")
        assert guard.render("button") == "button"

    @pytest.mark.anyio
    async def test_renders_backup_when_denied(
        self, gate: AccessGate, routes: list[RouteSpec]
    ) -> None:
        await gate.init(routes, {"report": ["read"]})
        guard = PermissionGuard(gate, [EXPORT], backup="nope")
        assert guard.allowed is False
        assert guard.render("button") == "nope"

    @pytest.mark.anyio
    async def test_backup_defaults_to_none(
        self, gate: AccessGate, routes: list[RouteSpec]
    ) -> None:
        await gate.init(routes, {})
        assert PermissionGuard(gate, [EXPORT]).render("button") is None

    @pytest.mark.anyio
    async def test_follows_permission_updates(
        self, gate: AccessGate, routes: list[RouteSpec]
    ) -> None:
        await gate.init(routes, {})
        guard = PermissionGuard(gate, [EXPORT, MANAGE_SYS], match_any=True)
        assert guard.render("x") is None
        gate.update_granted_permissions({"sys:role": ["*"]})
        assert guard.render("x") == "x"

    @pytest.mark.anyio
    async def test_no_requirements_always_renders(
        self, gate: AccessGate, routes: list[RouteSpec]
    ) -> None:
        await gate.init(routes, {})
        assert PermissionGuard(gate).render("x") == "x"
