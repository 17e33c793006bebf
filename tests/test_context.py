"""Tests for ctxrouter.context — context dataclasses and the ContextVar."""

import pytest

from ctxrouter.context import PENDING, Ctx, CtxMeta, Timestamps, ctx_var, get_ctx


class TestDefaults:
    def test_ctx(self) -> None:
        ctx = Ctx()
        assert ctx.id == PENDING
        assert ctx.err is None
        assert ctx.locals == {}
        assert ctx.req.invocation is None
        assert ctx.res.meta is None

    def test_user_is_anonymous(self) -> None:
        user = Ctx().user
        assert user.id == "none"
        assert user.kind == "user"
        assert user.role == ["none"]
        assert user.scope == []
        assert user.handle is None

    def test_timestamps_unset(self) -> None:
        ts = Timestamps()
        assert (ts.in_, ts.client_in, ts.out, ts.exec_time, ts.owd) == (-1, -1, -1, -1, -1)

    def test_meta(self) -> None:
        meta = CtxMeta()
        assert meta.service_name == "ctx-service"
        assert meta.instance.id == PENDING
        assert meta.monitor.trace_id == PENDING
        assert meta.log is None

    def test_mutable_defaults_not_shared(self) -> None:
        a, b = Ctx(), Ctx()
        a.user.role.append("admin")
        a.req.transport.meta["k"] = "v"
        assert b.user.role == ["none"]
        assert b.req.transport.meta == {}


class TestGetCtx:
    def test_outside_dispatch(self) -> None:
        with pytest.raises(LookupError):
            get_ctx()

    def test_inside(self) -> None:
        ctx = Ctx()
        token = ctx_var.set(ctx)
        try:
            assert get_ctx() is ctx
        finally:
            ctx_var.reset(token)
