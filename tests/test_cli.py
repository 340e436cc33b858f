import json

import pytest

from dbexport.cli import main


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[connection]\n'
        'url = "jdbc:postgresql://db.internal:5432/shop"\n'
        'username = "exporter"\n'
        'password = "s3cret"\n'
        '\n'
        '[query]\n'
        'table = "orders"\n'
    )
    return path


def test_resolve_prints_masked_export_args(config_path, capsys):
    main(["--config", str(config_path), "resolve", "--partition", "2024-01-01", "--skip-partition-check"])

    output = capsys.readouterr().out
    data = json.loads(output)
    assert "s3cret" not in output
    assert data["connection"]["username"] == "exporter"
    assert data["connection"]["password"] == "*****"
    assert data["query"]["table"] == "orders"
    assert data["query"]["partition"] == "2024-01-01T00:00:00"


def test_resolve_with_too_old_partition_exits(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config_path), "resolve", "--partition", "2000-01-01"])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "Too old partition date 2000-01-01T00:00:00" in err
    assert "--skip-partition-check" in err


def test_query_prints_sql(config_path, capsys):
    main([
        "--config", str(config_path), "query",
        "--table", "public.orders",
        "--partition", "2024-01-01",
        "--partition-column", "updated_at",
        "--limit", "10",
    ])

    output = capsys.readouterr().out
    assert "Table: public.orders" in output
    assert "Partition column: updated_at" in output
    assert (
        "SELECT * FROM public.orders WHERE updated_at >= '2024-01-01 00:00:00'"
        " AND updated_at < '2024-01-02 00:00:00' LIMIT 10"
    ) in output


def test_query_partition_column_without_partition(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config_path), "query", "--partition-column", "updated_at"])

    assert exc.value.code == 1
    assert "--partition parameter must also be configured" in capsys.readouterr().err


def test_missing_required_options(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "missing.toml"), "query"])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "connection_url is required" in err
    assert "table is required" in err


def test_config_masks_password(config_path, capsys):
    main(["--config", str(config_path), "config", "--effective"])

    output = capsys.readouterr().out
    assert "Status: Found" in output
    assert "s3cret" not in output
    assert "table: orders" in output


def test_config_not_found(tmp_path, capsys):
    main(["--config", str(tmp_path / "missing.toml"), "config"])

    assert "Status: Not found" in capsys.readouterr().out
