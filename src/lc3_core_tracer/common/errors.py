"""
例外定義モジュール。

シミュレータ全体で送出される例外の階層を定義します。
未知のトラップベクタは例外ではなく、何もしない命令として扱われます。
"""


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラスです。
class Lc3Error(Exception):
    pass


# @intent:responsibility イメージファイルが指定されなかったことを表します。マシン生成前に送出されます。
class UsageError(Lc3Error):
    pass


# @intent:responsibility イメージファイルの読み込み失敗を表します。失敗したパスを保持します。
class ImageLoadError(Lc3Error):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"failed to load image: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


# @intent:responsibility 未定義オペコード(RTI/RES)のフェッチを表します。実行は再開できません。
class IllegalInstructionError(Lc3Error):
    def __init__(self, address: int, word: int):
        self.address = address
        self.word = word
        super().__init__(f"Illegal instruction {word:#06x} at {address:#06x}")


# @intent:responsibility システム構成(YAML)の不正を表します。
class ConfigError(Lc3Error):
    pass
