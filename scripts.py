"""
開発用コマンド（pyproject.toml の project.scripts から呼び出す）

    lint    ruff check
    format  ruff format
    fix     ruff check --fix + ruff format
    test    pytest（引数はそのまま渡す）
    check   lint と test をまとめて実行し、結果を要約する
"""

import subprocess
import sys

# 品質チェック対象
SOURCE_DIRS = ["sheetserializer", "tests", "scripts.py"]


def _ruff(*args: str, capture: bool = False) -> subprocess.CompletedProcess:
    return subprocess.run(["ruff", *args, *SOURCE_DIRS], capture_output=capture)


def _pytest(*args: str, capture: bool = False) -> subprocess.CompletedProcess:
    return subprocess.run(["pytest", *args], capture_output=capture)


def lint():
    """ruffで静的解析を実行する"""
    sys.exit(_ruff("check").returncode)


def format():
    """ruffでフォーマットを実行する"""
    sys.exit(_ruff("format").returncode)


def fix():
    """ruffで自動修正とフォーマットを実行する"""
    print("🔧 自動修正とフォーマットを実行中...")
    returncode = _ruff("check", "--fix").returncode or _ruff("format").returncode

    if returncode == 0:
        print("✅ 完了しました")
    else:
        print("❌ 修正できない問題があります")
    sys.exit(returncode)


def test():
    """pytestを実行する（例: `test -m unit -k codec`）"""
    sys.exit(_pytest(*sys.argv[1:]).returncode)


def check():
    """
    Lintとテストを実行して結果を要約する（修正はしない）

    失敗した項目だけ出力を表示する。
    """
    results = {}

    print("📝 Lintを実行中...")
    results["Lint"] = _ruff("check", capture=True)
    print("📐 フォーマットを確認中...")
    results["Format"] = _ruff("format", "--check", capture=True)
    print("🧪 テストを実行中...")
    results["Tests"] = _pytest("-q", capture=True)

    print("\n" + "=" * 40)
    for name, result in results.items():
        status = "✅ PASS" if result.returncode == 0 else "❌ FAIL"
        print(f"{name:<8}{status}")
    print("=" * 40)

    failed = [name for name, result in results.items() if result.returncode != 0]
    for name in failed:
        print(f"\n--- {name} ---")
        print(results[name].stdout.decode())
        print(results[name].stderr.decode())

    if failed:
        sys.exit(1)
    print("\n🎉 すべてのチェックが成功しました！")
