"""支持 python -m boon 运行"""

from .cli.main import app

if __name__ == "__main__":
    app()
