"""
CoverSnap - 文章/视频封面提取工具

支持平台: 微信公众号、知乎、小红书、B站，以及带 og:image 的任意网页

用法:
    coversnap "链接或分享文本"
    coversnap "链接" --json
    coversnap "链接" --download --output ./covers
    coversnap --batch links.txt --json
    coversnap --history
    coversnap --replay 1
"""

import argparse
import json
import logging
import os
import sys
import webbrowser
from datetime import datetime

from . import __version__
from .core import download_asset, extract
from .download import suggest_filename
from .errors import CoverSnapError
from .history import HistoryStore
from .models import ExtractionResult, OpenExternally

logger = logging.getLogger("coversnap")

# ─── 格式化输出 ─────────────────────────────────────────────────────────────────

def format_result(r: ExtractionResult) -> str:
    lines = [f"{'═'*60}"]
    lines.append(f"  平台: {r.platform.value}")
    lines.append(f"  标题: {r.title}")
    lines.append(f"{'─'*60}")
    lines.append(f"  🖼  封面: {r.cover_url}")
    lines.append(f"  🔗 原文: {r.original_url}")
    lines.append(f"{'═'*60}")
    return "\n".join(lines)


def format_brief(r: ExtractionResult) -> str:
    title = r.title.replace("\n", " ")[:60]
    return f'[{r.platform.value}] "{title}" | {r.cover_url}'


def format_history(store: HistoryStore) -> str:
    entries = store.entries()
    if not entries:
        return "No recent history"
    lines = [f"\n🕘 历史记录 ({len(entries)})\n{'─' * 50}"]
    for i, (ts, r) in enumerate(entries, 1):
        when = datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M") if ts else ""
        lines.append(f"  {i:>2}. [{r.platform.value}] {r.title[:50]}  {when}")
        lines.append(f"      {r.cover_url}")
    return "\n".join(lines)


# ─── 下载 ──────────────────────────────────────────────────────────────────────

def save_cover(r: ExtractionResult, output_dir: str, open_browser: bool = True):
    """Download the cover into ``output_dir``; returns the file path, or None when handed to a browser."""
    outcome = download_asset(r.cover_url)
    if isinstance(outcome, OpenExternally):
        print(f"⚠️  无法下载，请在浏览器中打开: {outcome.url}", file=sys.stderr)
        if open_browser:
            webbrowser.open_new_tab(outcome.url)
        return None

    os.makedirs(output_dir, exist_ok=True)
    fpath = os.path.join(output_dir, suggest_filename(outcome.extension))
    with open(fpath, "wb") as f:
        f.write(outcome.content)
    print(f"  ✓ {os.path.basename(fpath)} ({len(outcome.content)/1024:.1f} KB)")
    return fpath


# ─── 批量处理 ──────────────────────────────────────────────────────────────────

def batch_extract(links_file: str, as_json: bool = False, history: HistoryStore = None) -> list[ExtractionResult]:
    results = []
    errors = []
    with open(links_file, encoding="utf-8") as f:
        inputs = [line.strip() for line in f if line.strip() and not line.startswith("#")]

    total = len(inputs)
    for i, text in enumerate(inputs, 1):
        print(f"[{i}/{total}] 处理中... {text[:60]}", file=sys.stderr)
        try:
            result = extract(text)
        except CoverSnapError as e:
            errors.append((text, str(e)))
            print(f"  ❌ 错误: {e}", file=sys.stderr)
            continue
        results.append(result)
        if history is not None:
            history.add(result)
        if not as_json:
            print(format_result(result))

    if as_json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))

    print(f"\n{'═'*40}", file=sys.stderr)
    print(f"  批量处理完成: 成功 {len(results)}/{total}", file=sys.stderr)
    if errors:
        print(f"  失败 {len(errors)} 个:", file=sys.stderr)
        for text, err in errors:
            print(f"    - {text[:50]}: {err[:60]}", file=sys.stderr)
    print(f"{'═'*40}", file=sys.stderr)
    return results


# ─── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coversnap",
        description=f"CoverSnap v{__version__} - 文章/视频封面提取工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
支持平台: 微信公众号 | 知乎 | 小红书 | B站 | 通用网页

示例:
  coversnap "https://mp.weixin.qq.com/s/xxx"
  coversnap "【标题】 https://b23.tv/xxx 复制链接" --download
  coversnap --batch links.txt --json
""",
    )
    parser.add_argument("url", nargs="?", help="链接或包含链接的分享文本")
    parser.add_argument("--json", "-j", action="store_true", help="JSON 格式输出")
    parser.add_argument("--brief", action="store_true", help="极简一行输出")
    parser.add_argument("--download", "-d", action="store_true", help="下载封面图片")
    parser.add_argument("--output", "-o", default="./downloads", help="下载目录")
    parser.add_argument("--no-open", action="store_true", help="下载失败时不自动打开浏览器")
    parser.add_argument("--batch", "-b", metavar="FILE", help="批量处理: 从文件读取链接列表")
    parser.add_argument("--history", action="store_true", help="查看历史记录")
    parser.add_argument("--replay", type=int, metavar="N", help="重新显示第 N 条历史记录（不联网）")
    parser.add_argument("--clear-history", action="store_true", help="清空历史记录")
    parser.add_argument("--no-history", action="store_true", help="不写入历史记录")
    parser.add_argument("--verbose", "-v", action="store_true", help="详细日志")
    return parser


def _print_result(r: ExtractionResult, args) -> None:
    if args.json:
        print(json.dumps(r.to_dict(), ensure_ascii=False, indent=2))
    elif args.brief:
        print(format_brief(r))
    else:
        print(format_result(r))


def run(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    if args.clear_history:
        HistoryStore().clear()
        print("🧹 历史记录已清空")
        return 0

    if args.history:
        print(format_history(HistoryStore()))
        return 0

    if args.replay is not None:
        try:
            result = HistoryStore().find(args.replay)
        except IndexError as e:
            print(f"❌ 错误: {e}", file=sys.stderr)
            return 1
        _print_result(result, args)
        if args.download:
            save_cover(result, args.output, open_browser=not args.no_open)
        return 0

    if args.batch:
        batch_extract(args.batch, as_json=args.json, history=None if args.no_history else HistoryStore())
        return 0

    if not args.url:
        parser.print_help()
        return 1

    try:
        result = extract(args.url)
        if not args.no_history:
            HistoryStore().add(result)
        _print_result(result, args)
        if args.download:
            print("\n📥 下载封面:")
            save_cover(result, args.output, open_browser=not args.no_open)
    except CoverSnapError as e:
        print(f"❌ 错误: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    return 0


def main():
    try:
        code = run()
    except Exception as e:
        # CLI catches all errors and prints friendly message.
        print(f"ERROR: {e}")
        raise SystemExit(1)
    raise SystemExit(code)
