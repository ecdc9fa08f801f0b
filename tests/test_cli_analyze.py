import pandas as pd
from click.testing import CliRunner

from nutgraph.__main__ import main


def test_analyze_sample_file(fpath_sample_csv):
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", fpath_sample_csv])
    assert result.exit_code == 0, result.output
    assert "Average degree centrality for gender F: 2.5" in result.output
    assert "Average degree centrality for race Asian: 0.0" in result.output
    assert "Degree centrality for allergy Peanut: 2" in result.output
    assert "Hazelnut" not in result.output


def test_analyze_category_option(fpath_sample_csv):
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", fpath_sample_csv, "-c", "hazelnut", "-c", "Brazil"])
    assert result.exit_code == 0, result.output
    assert "Degree centrality for allergy Brazil: 1" in result.output
    assert "Degree centrality for allergy Hazelnut: 1" in result.output
    assert "Degree centrality for allergy Peanut" not in result.output


def test_analyze_categories_from_env(fpath_sample_csv):
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["analyze"],
        env={"NUTGRAPH_INPUT": fpath_sample_csv, "NUTGRAPH_CATEGORIES": "Peanut,Cashew"},
    )
    assert result.exit_code == 0, result.output
    assert "Degree centrality for allergy Cashew: 1" in result.output
    assert "Degree centrality for allergy Treenut" not in result.output


def test_analyze_unknown_category_is_usage_error(fpath_sample_csv):
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", fpath_sample_csv, "-c", "Macadamia"])
    assert result.exit_code == 2
    assert "Macadamia" in result.output


def test_analyze_per_individual_and_output(fpath_sample_csv, tmp_path):
    out = tmp_path / "reports" / "centrality.csv"
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", fpath_sample_csv, "--per-individual", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Degree centrality for node 10 (ID: 205651): 3" in result.output

    frame = pd.read_csv(out)
    assert {"gender", "race", "ethnicity", "payer factor", "atopic march cohort", "allergy"} == set(frame["dimension"])


def test_analyze_bad_record_exits_nonzero(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text(
        "subject_id,birth_year,gender_factor,race_factor,ethnicity_factor,payer_factor,"
        "atopic_march_cohort,age_start_years,age_end_years,peanut_alg_start\n"
        "P1,2000,M,White,Hispanic,Private,sometimes,1.0,2.0,1.0\n"
    )
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", str(bad)])
    assert result.exit_code == 1
    assert "Errors found in record table:" in result.output
    assert "atopic_march_cohort" in result.output
    assert "Average degree centrality" not in result.output


def test_analyze_writes_log_file(fpath_sample_csv, tmp_path):
    log_path = tmp_path / "nutgraph.log"
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", fpath_sample_csv, "--log-file-path", str(log_path)])
    assert result.exit_code == 0, result.output
    assert "Graph built with 13 nodes and 6 edges" in log_path.read_text()


def test_analyze_missing_file_exits_one(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", str(tmp_path / "absent.csv")])
    assert result.exit_code == 1
    assert "Error: Failed to read" in result.output


def test_analyze_corrupt_workbook_exits_one(tmp_path):
    path = tmp_path / "subjects.xlsx"
    path.write_text("not a workbook")
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", str(path)])
    assert result.exit_code == 1
    assert "Error: Failed to read" in result.output


def test_analyze_reports_missing_allergy_columns_as_warnings(tmp_path):
    partial = tmp_path / "partial.csv"
    partial.write_text(
        "subject_id,birth_year,gender_factor,race_factor,ethnicity_factor,payer_factor,"
        "atopic_march_cohort,age_start_years,age_end_years,peanut_alg_start\n"
        "P1,2000,M,White,Hispanic,Private,true,1.0,2.0,1.0\n"
    )
    runner = CliRunner()
    result = runner.invoke(main, ["analyze", str(partial)])
    assert result.exit_code == 0, result.output
    assert "Warnings found in record table:" in result.output
    assert "cashew_alg_start" in result.output
    assert "Degree centrality for allergy Peanut: 1" in result.output
