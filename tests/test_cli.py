import json

import pytest

import coversnap
import coversnap.cli as cli
from coversnap.history import HistoryStore

P = coversnap.Platform

RESULT = coversnap.ExtractionResult(
    cover_url="https://i0.hdslb.com/bfs/archive/abc.jpg",
    original_url="https://www.bilibili.com/video/BV1xx411c7mD",
    title="【4K】城市夜景延时摄影",
    platform=P.BILIBILI,
)


@pytest.fixture
def fake_extract(monkeypatch):
    calls = []

    def _extract(text):
        calls.append(text)
        if "bad" in text:
            raise coversnap.NoCoverFound()
        return RESULT

    monkeypatch.setattr(cli, "extract", _extract)
    return calls


@pytest.mark.unit
class Describe_cli_run:
    def test_given_url_should_print_json_and_record_history(self, history_home, fake_extract, capsys):
        """--json 输出结果并写入历史记录。"""
        assert cli.run(["https://b23.tv/abc", "--json"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["platform"] == "Bilibili"
        assert out["cover_url"] == RESULT.cover_url
        assert HistoryStore().find(1) == RESULT

    def test_given_no_history_flag_should_not_record(self, history_home, fake_extract, capsys):
        """--no-history 时不写入历史。"""
        cli.run(["https://b23.tv/abc", "--brief", "--no-history"])
        assert capsys.readouterr().out.startswith("[Bilibili]")
        assert not history_home.exists()

    def test_given_extraction_error_should_exit_with_one(self, history_home, fake_extract, capsys):
        """提取失败时打印错误并返回 1。"""
        assert cli.run(["https://example.com/bad"]) == 1
        assert coversnap.NoCoverFound.message in capsys.readouterr().err

    def test_given_no_url_should_print_help(self, history_home, capsys):
        """未提供链接时打印帮助并返回 1。"""
        assert cli.run([]) == 1
        assert "coversnap" in capsys.readouterr().out

    def test_history_and_replay_should_not_touch_network(self, history_home, monkeypatch, capsys):
        """查看与回放历史不应调用提取逻辑。"""
        HistoryStore().add(RESULT, timestamp=1700000000000)
        monkeypatch.setattr(cli, "extract", lambda text: pytest.fail("network used"))

        assert cli.run(["--history"]) == 0
        assert RESULT.cover_url in capsys.readouterr().out

        assert cli.run(["--replay", "1", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["title"] == RESULT.title

    def test_replay_out_of_range_should_fail(self, history_home, capsys):
        """回放不存在的序号返回 1。"""
        assert cli.run(["--replay", "3"]) == 1

    def test_empty_history_should_say_so(self, history_home, capsys):
        """没有历史记录时给出提示。"""
        cli.run(["--history"])
        assert "No recent history" in capsys.readouterr().out

    def test_clear_history_should_empty_store(self, history_home, capsys):
        """--clear-history 清空历史。"""
        HistoryStore().add(RESULT)
        assert cli.run(["--clear-history"]) == 0
        assert len(HistoryStore()) == 0

    def test_given_batch_file_should_skip_comments_and_report_failures(
        self, history_home, fake_extract, tmp_path, capsys
    ):
        """批量模式跳过注释行，并汇总失败条目。"""
        links = tmp_path / "links.txt"
        links.write_text("# covers\nhttps://b23.tv/a\n\nhttps://example.com/bad\n", encoding="utf-8")
        assert cli.run(["--batch", str(links), "--json"]) == 0
        captured = capsys.readouterr()
        assert fake_extract == ["https://b23.tv/a", "https://example.com/bad"]
        assert len(json.loads(captured.out)) == 1
        assert "成功 1/2" in captured.err


@pytest.mark.unit
class Describe_save_cover:
    def test_given_download_should_write_file(self, monkeypatch, tmp_path, capsys):
        """下载成功时写入以时间戳命名的文件。"""
        monkeypatch.setattr(
            cli, "download_asset",
            lambda url: coversnap.AssetDownload(content=b"\x89PNG", extension="png"),
        )
        path = cli.save_cover(RESULT, str(tmp_path / "out"))
        assert path.endswith(".png")
        assert (tmp_path / "out").joinpath(path.rsplit("/", 1)[-1]).read_bytes() == b"\x89PNG"

    def test_given_open_externally_should_open_browser(self, monkeypatch, tmp_path, capsys):
        """无法下载时交给浏览器打开原图。"""
        opened = []
        monkeypatch.setattr(cli, "download_asset", lambda url: coversnap.OpenExternally(url=url))
        monkeypatch.setattr(cli.webbrowser, "open_new_tab", opened.append)
        assert cli.save_cover(RESULT, str(tmp_path)) is None
        assert opened == [RESULT.cover_url]

    def test_given_no_open_should_only_print(self, monkeypatch, tmp_path, capsys):
        """--no-open 时只提示地址，不打开浏览器。"""
        monkeypatch.setattr(cli, "download_asset", lambda url: coversnap.OpenExternally(url=url))
        monkeypatch.setattr(cli.webbrowser, "open_new_tab", lambda url: pytest.fail("browser opened"))
        cli.save_cover(RESULT, str(tmp_path), open_browser=False)
        assert RESULT.cover_url in capsys.readouterr().err
