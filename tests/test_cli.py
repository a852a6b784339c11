from cli import main
from helpers import SAMPLE_INPUT


def test_cli_writes_output_directory(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text(SAMPLE_INPUT)
    output_dir = tmp_path / "result"

    assert main(["--input", str(input_path), "--output", str(output_dir)]) == 0

    assert (output_dir / "out.txt").read_text() == "S1-OK\nS2-ROLLBACK-5\n"
    assert (output_dir / "B.txt").read_text() == "S1,write,1\nS2,read,1\nS2,read,2\nS2,write,3\n"
    assert (output_dir / "D.txt").read_text() == ""


def test_cli_commit_policy_flag(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text("A, B\nt1, t2\n8, 9\nP-r2(A) c w1(A)\n")

    assert main(["--input", str(input_path), "--output", str(tmp_path), "--commit-policy", "reset"]) == 0
    assert (tmp_path / "out.txt").read_text() == "P-OK\n"

    assert main(["--input", str(input_path), "--output", str(tmp_path)]) == 0
    assert (tmp_path / "out.txt").read_text() == "P-ROLLBACK-2\n"


def test_cli_reports_parse_failure(tmp_path):
    assert main(["--input", str(tmp_path / "missing.txt"), "--output", str(tmp_path)]) == 1


def test_cli_reports_processing_failure(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text("A\nt1\n1\nS1 - r2(A)\n")

    assert main(["--input", str(input_path), "--output", str(tmp_path)]) == 1
    assert (tmp_path / "out.txt").read_text() == ""


def test_cli_rejects_invalid_commit_policy_setting(tmp_path, monkeypatch):
    input_path = tmp_path / "in.txt"
    input_path.write_text(SAMPLE_INPUT)
    monkeypatch.setenv("TO_SCHEDULER_COMMIT_POLICY", "bogus")

    assert main(["--input", str(input_path), "--output", str(tmp_path / "result")]) == 1
    assert not (tmp_path / "result").exists()


def test_cli_rejects_invalid_log_level_setting(tmp_path, monkeypatch):
    input_path = tmp_path / "in.txt"
    input_path.write_text(SAMPLE_INPUT)
    monkeypatch.setenv("TO_SCHEDULER_LOG_LEVEL", "loud")

    assert main(["--input", str(input_path), "--output", str(tmp_path / "result")]) == 1


def test_cli_reports_unwritable_verdict_file(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text(SAMPLE_INPUT)
    output_dir = tmp_path / "result"
    (output_dir / "out.txt").mkdir(parents=True)

    assert main(["--input", str(input_path), "--output", str(output_dir)]) == 1


def test_cli_reports_unwritable_audit_log(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text(SAMPLE_INPUT)
    output_dir = tmp_path / "result"
    (output_dir / "A.txt").mkdir(parents=True)

    assert main(["--input", str(input_path), "--output", str(output_dir)]) == 1
    assert (output_dir / "out.txt").read_text() == "S1-OK\nS2-ROLLBACK-5\n"


def test_cli_rejects_item_ids_with_path_separators(tmp_path):
    input_path = tmp_path / "in.txt"
    input_path.write_text("A/B\nt1\n1\nS1 - r1(A/B)\n")

    assert main(["--input", str(input_path), "--output", str(tmp_path / "result")]) == 1
    assert not (tmp_path / "result").exists()
