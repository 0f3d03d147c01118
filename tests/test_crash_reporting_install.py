from __future__ import annotations

import sys
import threading


def test_install_crash_reporting_can_be_disabled(monkeypatch, tmp_path):
    monkeypatch.setenv("FSMETA_ERROR_DIR", str(tmp_path))
    monkeypatch.setenv("FSMETA_DISABLE_CRASH_HOOKS", "1")

    from fs_metadata.shared.error_reporting import install_crash_reporting

    assert install_crash_reporting() is False


def test_install_crash_reporting_is_skipped_under_pytest(monkeypatch, tmp_path):
    monkeypatch.setenv("FSMETA_ERROR_DIR", str(tmp_path))
    monkeypatch.delenv("FSMETA_DISABLE_CRASH_HOOKS", raising=False)
    monkeypatch.delenv("FSMETA_ENABLE_CRASH_HOOKS", raising=False)
    original = sys.excepthook

    from fs_metadata.shared.error_reporting import install_crash_reporting

    assert install_crash_reporting() is False
    assert sys.excepthook is original


def test_install_crash_reporting_wraps_hooks_when_enabled(monkeypatch, tmp_path):
    # hooks are restored by monkeypatch after the test
    monkeypatch.setenv("FSMETA_ERROR_DIR", str(tmp_path))
    monkeypatch.setenv("FSMETA_ENABLE_CRASH_HOOKS", "1")
    monkeypatch.delenv("FSMETA_DISABLE_CRASH_HOOKS", raising=False)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    original_threading_hook = threading.excepthook

    from fs_metadata.shared.error_reporting import install_crash_reporting

    assert install_crash_reporting(enable_faulthandler=False) is True
    assert threading.excepthook is not original_threading_hook
