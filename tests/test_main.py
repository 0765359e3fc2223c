import pandas as pd

from main import main, read_comments


def test_read_comments_text_file(tmp_path):
    path = tmp_path / "comments.txt"
    path.write_text("first comment\n\nsecond comment\n", encoding="utf-8")

    assert read_comments(path, "Comment Text") == ["first comment", "second comment"]


def test_read_comments_csv(tmp_path):
    path = tmp_path / "comments.csv"
    pd.DataFrame({"Comment Text": ["hello", None]}).to_csv(path, index=False)

    assert read_comments(path, "Comment Text") == ["hello", ""]


def test_main_writes_report(tmp_path):
    source = tmp_path / "comments.txt"
    source.write_text("I really enjoyed this video! Thanks for sharing.\nZ.e.u.s g.a.c.o.r m.a.x.w.i.n\n", encoding="utf-8")
    output = tmp_path / "report.csv"

    assert main([str(source), "--output", str(output)]) == 0

    df = pd.read_csv(output, encoding="utf-8-sig")
    assert len(df) == 2
    assert list(df["Is Gambling"]) == [False, True]


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.txt")]) == 1


def test_main_missing_column(tmp_path):
    path = tmp_path / "comments.csv"
    pd.DataFrame({"text": ["hello"]}).to_csv(path, index=False)

    assert main([str(path), "--output", str(tmp_path / "out.csv")]) == 1


def test_main_only_flagged_excel(tmp_path):
    source = tmp_path / "comments.txt"
    source.write_text("I really enjoyed this video! Thanks for sharing.\nZ.e.u.s g.a.c.o.r m.a.x.w.i.n\n", encoding="utf-8")
    output = tmp_path / "report.xlsx"

    assert main([str(source), "--output", str(output), "--only-flagged"]) == 0

    df = pd.read_excel(output, sheet_name="Results", engine="openpyxl")
    assert list(df["Comment Text"]) == ["Z.e.u.s g.a.c.o.r m.a.x.w.i.n"]
