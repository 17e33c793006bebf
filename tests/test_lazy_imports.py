"""Tests for the ctxrouter package root and its deferred attribute lookup."""

import pytest

import ctxrouter
from ctxrouter.errors import HandlerNotFound
from ctxrouter.router import CtxRouter


class TestPublicNames:
    @pytest.mark.parametrize("name", ctxrouter.__all__)
    def test_exported_name_is_importable(self, name: str) -> None:
        module = __import__(ctxrouter._LAZY_IMPORTS[name], fromlist=[name])
        assert getattr(ctxrouter, name) is getattr(module, name)

    def test_registry_and_all_agree(self) -> None:
        assert sorted(ctxrouter._LAZY_IMPORTS) == sorted(ctxrouter.__all__)

    def test_engine_and_errors_exported(self) -> None:
        assert ctxrouter.CtxRouter is CtxRouter
        assert ctxrouter.HandlerNotFound is HandlerNotFound
        assert issubclass(ctxrouter.RouterError, ctxrouter.CtxError)

    def test_catalog_exported(self) -> None:
        err = ctxrouter.ROUTER_ERRORS.handler.HANDLER_NOT_FOUND()
        assert isinstance(err, ctxrouter.HandlerNotFound)


class TestMissingNames:
    def test_unregistered_name(self) -> None:
        with pytest.raises(AttributeError, match="module 'ctxrouter' has no attribute 'Router'"):
            ctxrouter.__getattr__("Router")

    def test_internal_module_not_exported(self) -> None:
        assert "invoke" not in ctxrouter.__all__


def test_version() -> None:
    assert ctxrouter.__version__ == "0.1.0"
