"""End-to-end runs of the fbc command against real files."""
import gzip
import zlib
import brotli
import pytest
from typer.testing import CliRunner
from fbc.main import app

DECODERS = {
    "br": brotli.decompress,
    "gz": gzip.decompress,
    "zlib": zlib.decompress,
    "deflate": lambda data: zlib.decompress(data, -zlib.MAX_WBITS),
    "def": lambda data: zlib.decompress(data, -zlib.MAX_WBITS),
}

@pytest.fixture
def runner():
    return CliRunner()

def _make(path, content="Hello, World! This is a test content for compression. " * 20):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path

@pytest.mark.parametrize("format_tag", ["br", "gz", "zlib", "deflate", "def"])
def test_single_file_each_format(runner, tmp_path, format_tag):
    source = _make(tmp_path / "input" / "test.txt")
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-f", str(source), "--format", format_tag, "-o", str(out_dir)])

    assert result.exit_code == 0, result.output
    output = out_dir / f"test.txt.{format_tag}"
    assert output.exists()
    assert DECODERS[format_tag](output.read_bytes()) == source.read_bytes()
    assert f"Compressing: {output}" in result.output
    assert "Done: " in result.output

def test_output_alongside_input_by_default(runner, tmp_path):
    source = _make(tmp_path / "data.json", '{"a": 1}')

    result = runner.invoke(app, ["-f", str(source)])

    assert result.exit_code == 0
    assert brotli.decompress((tmp_path / "data.json.br").read_bytes()) == b'{"a": 1}'

def test_directory_recursive_flattens(runner, tmp_path):
    in_dir = tmp_path / "input"
    _make(in_dir / "file1.txt")
    _make(in_dir / "sub" / "file2.txt")
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-d", str(in_dir), "-o", str(out_dir)])

    assert result.exit_code == 0, result.output
    assert (out_dir / "file1.txt.br").exists()
    assert (out_dir / "file2.txt.br").exists()
    assert not (out_dir / "sub").exists()

def test_directory_non_recursive(runner, tmp_path):
    in_dir = tmp_path / "input"
    _make(in_dir / "x.txt")
    _make(in_dir / "sub" / "y.txt")
    out_dir = tmp_path / "output"

    runner.invoke(app, ["-d", str(in_dir), "-o", str(out_dir), "--no-recursive"])

    assert sorted(p.name for p in out_dir.iterdir()) == ["x.txt.br"]

def test_pattern_only_compresses_matching_files(runner, tmp_path):
    in_dir = tmp_path / "input"
    _make(in_dir / "match.txt")
    _make(in_dir / "ignore.log")
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-d", str(in_dir), "-p", "*.txt", "-o", str(out_dir)])

    assert result.exit_code == 0
    assert (out_dir / "match.txt.br").exists()
    assert not (out_dir / "ignore.log.br").exists()

def test_invalid_format_is_silent(runner, tmp_path):
    source = _make(tmp_path / "input" / "test.txt")
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-f", str(source), "--format", "xyz", "-o", str(out_dir)])

    assert result.exit_code == 0
    assert not (out_dir / "test.txt.xyz").exists()
    assert list(out_dir.iterdir()) == []
    assert "Error" not in result.output
    assert "Compressing:" not in result.output

@pytest.mark.parametrize("level", ["Optimal", "Fastest", "NoCompression", "SmallestSize"])
def test_compression_levels(runner, tmp_path, level):
    source = _make(tmp_path / "input" / "test.txt")
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-f", str(source), "-l", level, "-o", str(out_dir)])

    assert result.exit_code == 0
    assert brotli.decompress((out_dir / "test.txt.br").read_bytes()) == source.read_bytes()

def test_quiet_mode_prints_nothing(runner, tmp_path):
    source = _make(tmp_path / "input" / "test.txt")

    result = runner.invoke(app, ["-f", str(source), "-o", str(tmp_path / "output"), "-q"])

    assert result.exit_code == 0
    assert "Compressing:" not in result.output
    assert "Done:" not in result.output
    assert (tmp_path / "output" / "test.txt.br").exists()

def test_explicit_output_files(runner, tmp_path):
    source = _make(tmp_path / "input" / "test.txt")
    target = tmp_path / "output" / "custom_output.br"
    target.parent.mkdir()

    result = runner.invoke(app, ["-f", str(source), "--output-file", str(target)])

    assert result.exit_code == 0
    assert target.exists()

def test_mismatched_output_files(runner, tmp_path):
    first = _make(tmp_path / "input" / "test1.txt")
    second = _make(tmp_path / "input" / "test2.txt")
    out_dir = tmp_path / "output"
    out_dir.mkdir()

    result = runner.invoke(app, ["-f", str(first), "-f", str(second), "--output-file", str(out_dir / "out1.br")])

    assert result.exit_code == 0
    assert "Error: The number of the output files must match the number of the input files." in result.output
    assert list(out_dir.iterdir()) == []

def test_mismatched_output_files_quiet(runner, tmp_path):
    first = _make(tmp_path / "a.txt")
    second = _make(tmp_path / "b.txt")

    result = runner.invoke(app, ["-f", str(first), "-f", str(second), "--output-file", str(tmp_path / "o.br"), "-q"])

    assert result.exit_code == 0
    assert result.output == ""

def test_output_files_with_empty_discovery_is_silent(runner, tmp_path):
    in_dir = tmp_path / "input"
    in_dir.mkdir()
    target = tmp_path / "out1.br"

    result = runner.invoke(app, ["-d", str(in_dir), "--output-file", str(target), "--fail-on-error"])

    assert result.exit_code == 0
    assert "Error" not in result.output
    assert not target.exists()

def test_negative_threads_runs_one_worker(runner, tmp_path):
    source = _make(tmp_path / "a.txt")

    result = runner.invoke(app, ["-f", str(source), "--format", "gz", "-t", "-1"])

    assert result.exit_code == 0, result.output
    assert gzip.decompress((tmp_path / "a.txt.gz").read_bytes()) == source.read_bytes()

def test_threads(runner, tmp_path):
    in_dir = tmp_path / "input"
    for i in range(8):
        _make(in_dir / f"file{i}.txt", f"content {i} " * 100)
    out_dir = tmp_path / "output"

    result = runner.invoke(app, ["-d", str(in_dir), "-o", str(out_dir), "-t", "4"])

    assert result.exit_code == 0
    for i in range(8):
        assert brotli.decompress((out_dir / f"file{i}.txt.br").read_bytes()) == f"content {i} ".encode() * 100
    assert result.output.count("Done: ") == 1

def test_missing_input_reports_and_continues(runner, tmp_path):
    good = _make(tmp_path / "good.txt")
    missing = tmp_path / "missing.txt"

    result = runner.invoke(app, ["-f", str(missing), "-f", str(good), "--format", "gz"])

    assert result.exit_code == 0
    assert f"Error: {missing}" in result.output
    assert (tmp_path / "good.txt.gz").exists()

    strict = runner.invoke(app, ["-f", str(missing), "-f", str(good), "--format", "gz", "--fail-on-error"])
    assert strict.exit_code == 1

def test_log_file_records_failures(runner, tmp_path):
    missing = tmp_path / "missing.txt"
    log_file = tmp_path / "logs" / "fbc.log"

    runner.invoke(app, ["-f", str(missing), "--log-path", str(log_file)])

    content = log_file.read_text()
    assert "Compression failed for" in content
    assert str(missing) in content

def test_config_file_run(runner, tmp_path):
    _make(tmp_path / "data" / "a.txt")
    _make(tmp_path / "data" / "b.csv")
    conf = tmp_path / "conf" / "fbc.yaml"
    conf.parent.mkdir()
    conf.write_text("input_dirs: [../data]\npatterns: ['*.csv']\nformat: gz\noutput_dir: ../out\n")

    result = runner.invoke(app, ["-c", str(conf)])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["b.csv.gz"]
