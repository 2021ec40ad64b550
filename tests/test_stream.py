import pytest

from kmtracker.core.fix import Fix
from kmtracker.core.stream import FixBroadcaster, FixStream


def test_broadcaster_delivers_in_order():
    received = []
    source = FixBroadcaster()
    source.subscribe(received.append)

    assert source.emit(Fix(1.0, 2.0)) == 1
    assert source.emit(Fix(3.0, 4.0)) == 1
    assert received == [Fix(1.0, 2.0), Fix(3.0, 4.0)]

def test_broadcaster_subscribe_is_idempotent():
    received = []
    source = FixBroadcaster()
    source.subscribe(received.append)
    source.subscribe(received.append)
    assert source.subscriber_count == 1

    source.unsubscribe(received.append)
    source.unsubscribe(received.append)
    assert source.subscriber_count == 0
    assert source.emit(Fix(0.0, 0.0)) == 0
    assert received == []

def test_stream_reads_in_file_order(tmp_path):
    p = tmp_path / "drive.csv"
    rows = "\n".join(f"{(i % 160) * 0.5 - 40},{-i * 0.0625}" for i in range(2500))
    p.write_text("latitude,longitude\n" + rows)

    fixes = FixStream(p).read_all()
    assert len(fixes) == 2500
    assert fixes[0] == Fix(-40.0, 0.0)
    # 1234 % 160 == 114
    assert fixes[1234] == Fix(17.0, -77.125)

def test_stream_is_bit_exact(tmp_path):
    p = tmp_path / "drive.csv"
    values = [(43.653226, -79.383184), (0.1 + 0.2, 1e-7), (-33.868820, 151.209296)]
    p.write_text("latitude,longitude\n" + "\n".join(f"{lat!r},{lon!r}" for lat, lon in values))
    assert [f.tuple for f in FixStream(p).read_all()] == values

def test_stream_skips_invalid_rows(tmp_path):
    p = tmp_path / "drive.csv"
    p.write_text("latitude,longitude,speed\n1.0,2.0,3\nabc,2.0,3\n,5.0,1\n3.0,4.0,0")
    assert FixStream(p).read_all() == [Fix(1.0, 2.0), Fix(3.0, 4.0)]

def test_stream_column_mapping(tmp_path):
    p = tmp_path / "export.csv"
    p.write_text("lat;lon\n1.5;2.5")
    stream = FixStream(p, sep=";", col_mapping={"latitude": "lat", "longitude": "lon"})
    assert stream.read_all() == [Fix(1.5, 2.5)]

def test_stream_missing_columns(tmp_path):
    p = tmp_path / "bad.csv"
    p.write_text("x,y\n1,2")
    with pytest.raises(ValueError, match="must contain"):
        FixStream(p).read_all()
