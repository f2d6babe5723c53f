"""
LC-3 Core Tracer

LC-3 (16bit教育用アーキテクチャ) のバイナリイメージを実行するシミュレータ。
"""
__version__ = "0.1.0"
