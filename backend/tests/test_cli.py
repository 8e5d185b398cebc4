"""Command-line pass table."""

import pytest

from satcore.main import main

from conftest import ISS_L1, ISS_L2, ISS_NAME


@pytest.fixture
def tle_file(tmp_path):
    path = tmp_path / "stations.tle"
    path.write_text(f"{ISS_NAME}\n{ISS_L1}\n{ISS_L2}\n", encoding="utf-8")
    return path


def test_prints_pass_table(tle_file, capsys):
    main([
        "--tle-file", str(tle_file), "--lat", "35", "--lon", "-100",
        "--min-el", "10", "--start", "2019-12-10T00:00:00+00:00",
    ])
    out = capsys.readouterr().out
    assert out.startswith("NAME")
    assert "ISS (ZARYA)" in out
    assert "Objects scanned:   1" in out
    assert "from 2019-12-10 00:00 UTC" in out


def test_name_filter_with_no_match_exits(tle_file):
    with pytest.raises(SystemExit) as info:
        main(["--tle-file", str(tle_file), "--lat", "0", "--lon", "0", "--name", "HUBBLE"])
    assert info.value.code == 1


def test_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["--tle-file", str(tmp_path / "none.tle"), "--lat", "0", "--lon", "0"])
