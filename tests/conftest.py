"""Shared fixtures for building small decoded-application trees."""

import zipfile
from pathlib import Path

import pytest

from boolseeker.logic.models import AnalysisConfig


CHECKER_SMALI = """.class public La/b/Checker;
.super Ljava/lang/Object;
.source "Checker.java"

.method public constructor <init>()V
    .locals 0
    invoke-direct {p0}, Ljava/lang/Object;-><init>()V
    return-void
.end method

.method public isRooted()Z
    .locals 2
    sget-object v0, Landroid/os/Build;->TAGS:Ljava/lang/String;
    const-string v1, "test-keys"
    invoke-virtual {v0, v1}, Ljava/lang/String;->contains(Ljava/lang/CharSequence;)Z
    move-result v0
    return v0
.end method

.method public isReady()Z
    .locals 1
    const/4 v0, 0x1
    return v0
.end method

.method public getName()Ljava/lang/String;
    .locals 1
    const-string v0, "frida"
    return-object v0
.end method
"""

EMULATOR_SMALI = """.class public final Lcom/example/security/EmuCheck;
.super Ljava/lang/Object;

.method public static final detectQemu()Z
    .locals 2
    const-string v0, "ro.kernel.qemu"
    const-string v1, "/dev/qemu_pipe"
    return v1
.end method

.method public static hasFrida()Z
    .locals 1
    const-string v0, "FRIDA"
    return v0
.end method
"""


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_apk(path: Path) -> Path:
    """A minimal zip that passes the APK check."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("AndroidManifest.xml", b"<manifest/>")
        zf.writestr("classes.dex", b"dex\n035\x00")
    return path


@pytest.fixture
def decoded_app(tmp_path: Path) -> Path:
    """An apktool-style output directory with two smali roots and native libs."""
    root = tmp_path / "app"
    write_file(root / "smali" / "a" / "b" / "Checker.smali", CHECKER_SMALI)
    write_file(root / "smali_classes2" / "com" / "example" / "security" / "EmuCheck.smali", EMULATOR_SMALI)
    write_file(root / "smali" / "a" / "b" / "notes.txt", ".method public isHidden()Z\n.end method\n")
    write_file(root / "AndroidManifest.xml", "<manifest package=\"a.b\"/>")

    libs = root / "lib" / "arm64-v8a"
    libs.mkdir(parents=True)
    (libs / "libguard.so").write_bytes(b"\x7fELF\x02\x01\x00frida-agent\x00/sbin/su\x00")
    (libs / "libplain.so").write_bytes(b"\x7fELF\x02\x01\x00nothing to see\x00")
    return root


@pytest.fixture
def quiet_config() -> AnalysisConfig:
    """Default configuration without the log file side effect."""
    return AnalysisConfig(write_log_file=False)
