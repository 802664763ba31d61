import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import build_elf
from elfsize import (
    ElfClass,
    ElfEncoding,
    ElfSizeCalculator,
    ElfSizeError,
    ErrorKind,
    MalformedSectionTableError,
    TruncatedFileError,
    UnsupportedClassError,
    UnsupportedEncodingError,
    analyze_elf_size,
    compute_elf_content_size,
)
from elfsize.core.engine import resolve_content_size
from elfsize.core.models import NormalizedElfHeader, NormalizedSectionHeader
from shared.config import AppConfig
from shared.math_utils import U64_MAX


CLASSES_AND_ORDERS = [
    (32, "little"),
    (32, "big"),
    (64, "little"),
    (64, "big"),
]


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------

def test_minimal_elf64_ends_with_section_table(make_elf):
    path = make_elf(bits=64, shoff=64, shentsize=64, shnum=1, sh_offset=64, sh_size=0)
    assert compute_elf_content_size(path) == 128


def test_minimal_elf64_last_section_past_table(make_elf):
    path = make_elf(bits=64, shoff=64, shentsize=64, shnum=1, sh_offset=200, sh_size=50)
    assert compute_elf_content_size(path) == 250


# ---------------------------------------------------------------------------
# Class / encoding matrix
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("bits,byteorder", CLASSES_AND_ORDERS)
def test_section_table_last(make_elf, bits, byteorder):
    shentsize = 40 if bits == 32 else 64
    path = make_elf(
        bits=bits, byteorder=byteorder,
        shoff=0x400, shentsize=shentsize, shnum=12,
        sh_offset=0x100, sh_size=0x80,
    )
    assert compute_elf_content_size(path) == 0x400 + shentsize * 12


@pytest.mark.parametrize("bits,byteorder", CLASSES_AND_ORDERS)
def test_trailing_section_wins(make_elf, bits, byteorder):
    shentsize = 40 if bits == 32 else 64
    path = make_elf(
        bits=bits, byteorder=byteorder,
        shoff=0x200, shentsize=shentsize, shnum=5,
        sh_offset=0x1000, sh_size=0x234,
    )
    result = analyze_elf_size(path)
    assert result.content_size == 0x1234
    assert result.content_size > result.sht_end
    assert result.sht_end == 0x200 + shentsize * 5


@pytest.mark.parametrize("bits", [32, 64])
def test_big_and_little_endian_agree(make_elf, bits):
    kwargs = dict(bits=bits, shoff=0x3000, shnum=29, sh_offset=0x3800, sh_size=0x123)
    big = make_elf(byteorder="big", **kwargs)
    little = make_elf(byteorder="little", **kwargs)
    assert compute_elf_content_size(big) == compute_elf_content_size(little)


def test_result_records_every_step(make_elf):
    path = make_elf(
        bits=32, byteorder="big", shoff=0x100, shnum=3,
        sh_offset=0x40, sh_size=0x10, pad_to=0x200,
    )
    result = analyze_elf_size(path)
    assert result.identification.elf_class is ElfClass.ELF32
    assert result.identification.encoding is ElfEncoding.MSB
    assert result.header.shoff == 0x100
    assert result.header.shentsize == 40
    assert result.header.shnum == 3
    assert result.last_section.sh_offset == 0x40
    assert result.last_section.sh_size == 0x10
    assert result.content_size == 0x100 + 40 * 3
    assert result.file_size == 0x200
    assert result.trailing_bytes == 0x200 - result.content_size
    assert not result.is_truncated


def test_appended_data_is_ignored(tmp_path):
    path = tmp_path / "signed.elf"
    image = build_elf(bits=64, shoff=64, shnum=1, sh_offset=64, sh_size=0)
    path.write_bytes(image + b"-----BEGIN CERTIFICATE-----" * 10)
    assert compute_elf_content_size(path) == 128
    assert analyze_elf_size(path).trailing_bytes == 270


def test_headers_pointing_past_eof_report_truncation(make_elf):
    path = make_elf(bits=64, shoff=64, shnum=1, sh_offset=4096, sh_size=4096)
    result = analyze_elf_size(path)
    assert result.content_size == 8192
    assert result.is_truncated
    assert result.trailing_bytes == 0


def test_pathlike_and_str_accepted(make_elf):
    path = make_elf(bits=64, shoff=64, shnum=1)
    assert compute_elf_content_size(str(path)) == compute_elf_content_size(path)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("length", [0, 1, 15])
def test_short_identification_is_truncated(tmp_path, length):
    path = tmp_path / "short.bin"
    path.write_bytes(b"\x7fELF\x02\x01\x01"[:length] + b"\x00" * max(0, length - 7))
    with pytest.raises(TruncatedFileError) as info:
        compute_elf_content_size(path)
    assert info.value.kind is ErrorKind.TRUNCATED_FILE


@pytest.mark.parametrize("ei_class", [0, 3, 255])
def test_unknown_class(make_elf, ei_class):
    path = make_elf(ei_class=ei_class)
    with pytest.raises(UnsupportedClassError) as info:
        compute_elf_content_size(path)
    assert info.value.kind is ErrorKind.UNSUPPORTED_CLASS
    assert info.value.value == ei_class


@pytest.mark.parametrize("ei_data", [0, 3, 0x80])
def test_unknown_encoding(make_elf, ei_data):
    path = make_elf(ei_data=ei_data)
    with pytest.raises(UnsupportedEncodingError) as info:
        compute_elf_content_size(path)
    assert info.value.kind is ErrorKind.UNSUPPORTED_ENCODING


def test_encoding_is_checked_before_class(make_elf):
    path = make_elf(ei_class=7, ei_data=7)
    with pytest.raises(UnsupportedEncodingError):
        compute_elf_content_size(path)


@pytest.mark.parametrize("bits", [32, 64])
def test_truncated_elf_header(tmp_path, bits):
    path = tmp_path / "cut.elf"
    path.write_bytes(build_elf(bits=bits, write_table=False)[:40])
    with pytest.raises(TruncatedFileError) as info:
        compute_elf_content_size(path)
    assert info.value.what == "ELF header"


@pytest.mark.parametrize("bits", [32, 64])
def test_truncated_last_section_header(tmp_path, bits):
    path = tmp_path / "cut.elf"
    image = build_elf(bits=bits, shoff=0x100, shnum=4)
    path.write_bytes(image[:-8])
    with pytest.raises(TruncatedFileError) as info:
        compute_elf_content_size(path)
    assert info.value.what == "ELF section header"


def test_section_table_beyond_eof(make_elf):
    path = make_elf(bits=64, shoff=1 << 40, shnum=3, write_table=False)
    with pytest.raises(TruncatedFileError):
        compute_elf_content_size(path)


def test_section_table_beyond_seekable_range(make_elf):
    path = make_elf(bits=64, shoff=1 << 63, shnum=1, write_table=False)
    with pytest.raises(TruncatedFileError):
        compute_elf_content_size(path)


@pytest.mark.parametrize("bits", [32, 64])
def test_zero_sections_is_malformed(make_elf, bits):
    path = make_elf(bits=bits, shoff=0, shnum=0)
    with pytest.raises(MalformedSectionTableError) as info:
        compute_elf_content_size(path)
    assert info.value.kind is ErrorKind.MALFORMED_SECTION_TABLE


def test_last_header_offset_overflow_is_malformed(make_elf):
    path = make_elf(
        bits=64, shoff=U64_MAX - 0x100, shentsize=0xFFFF, shnum=0xFFFF,
        write_table=False,
    )
    with pytest.raises(MalformedSectionTableError):
        compute_elf_content_size(path)


def test_last_section_end_overflow_is_malformed(make_elf):
    path = make_elf(bits=64, shoff=64, shnum=1, sh_offset=U64_MAX, sh_size=1)
    with pytest.raises(MalformedSectionTableError):
        compute_elf_content_size(path)


def test_missing_file(tmp_path):
    with pytest.raises(ElfSizeError) as info:
        compute_elf_content_size(tmp_path / "nope.elf")
    assert info.value.kind is ErrorKind.FILE_NOT_FOUND
    assert "nope.elf" in str(info.value)


def test_directory_is_unreadable(tmp_path):
    with pytest.raises(ElfSizeError) as info:
        compute_elf_content_size(tmp_path)
    assert info.value.kind is ErrorKind.UNREADABLE


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)
def test_permission_denied_is_unreadable(make_elf):
    path = make_elf(bits=64, shoff=64, shnum=1)
    path.chmod(0)
    try:
        with pytest.raises(ElfSizeError) as info:
            compute_elf_content_size(path)
        assert info.value.kind is ErrorKind.UNREADABLE
    finally:
        path.chmod(0o644)


# ---------------------------------------------------------------------------
# Size resolution
# ---------------------------------------------------------------------------

def test_resolve_takes_maximum():
    header = NormalizedElfHeader(shoff=100, shentsize=10, shnum=5)
    assert resolve_content_size(
        header, NormalizedSectionHeader(sh_offset=0, sh_size=10)
    ) == (150, 10, 150)
    assert resolve_content_size(
        header, NormalizedSectionHeader(sh_offset=140, sh_size=20)
    ) == (150, 160, 160)


def test_resolve_table_end_overflow():
    header = NormalizedElfHeader(shoff=U64_MAX - 10, shentsize=8, shnum=2)
    with pytest.raises(MalformedSectionTableError):
        resolve_content_size(header, NormalizedSectionHeader(sh_offset=0, sh_size=0))


# ---------------------------------------------------------------------------
# Calculator object
# ---------------------------------------------------------------------------

def test_calculator_is_reusable_across_threads(tmp_path):
    paths = []
    expected = []
    for i in range(16):
        shnum = i + 1
        path = tmp_path / f"f{i}.elf"
        bits = 32 if i % 2 else 64
        path.write_bytes(build_elf(
            bits=bits, byteorder="big" if i % 3 else "little",
            shoff=0x100, shnum=shnum,
        ))
        paths.append(path)
        expected.append(0x100 + (40 if bits == 32 else 64) * shnum)

    calc = ElfSizeCalculator()
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(calc.compute, paths))
    assert results == expected


def test_calculator_accepts_config(make_elf, tmp_path):
    config = AppConfig()
    config.global_settings.log_level = "DEBUG"
    config.global_settings.log_file = str(tmp_path / "logs" / "elfsize.log")
    calc = ElfSizeCalculator(config=config)
    assert calc.config is config
    assert calc.compute(make_elf(bits=64, shoff=64, shnum=1)) == 128
    assert "e_shnum=1" in (tmp_path / "logs" / "elfsize.log").read_text()


def test_configured_calculators_keep_separate_log_sinks(make_elf, tmp_path):
    config_a = AppConfig()
    config_a.global_settings.log_level = "DEBUG"
    config_a.global_settings.log_file = str(tmp_path / "a.log")
    calc_a = ElfSizeCalculator(config=config_a)

    config_b = AppConfig()
    config_b.global_settings.log_level = "DEBUG"
    config_b.global_settings.log_file = str(tmp_path / "b.log")
    calc_b = ElfSizeCalculator(config=config_b)
    ElfSizeCalculator(config=AppConfig())

    first = make_elf(bits=64, shoff=64, shnum=1)
    second = make_elf(bits=32, shoff=0x34, shnum=2)
    assert calc_a.compute(first) == 128
    assert calc_b.compute(second) == 0x34 + 80

    log_a = (tmp_path / "a.log").read_text()
    log_b = (tmp_path / "b.log").read_text()
    assert str(first) in log_a and str(second) not in log_a
    assert str(second) in log_b and str(first) not in log_b
