#!/usr/bin/env python
"""
招聘 API 后端启动脚本

用法:
    python run.py                    # 默认启动 (127.0.0.1:8000)
    python run.py -p 8080            # 指定端口
    python run.py --host 0.0.0.0     # 允许外网访问
    python run.py --reload           # 开启热重载
"""
import argparse
import shutil
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).parent
sys.path.insert(0, str(ROOT_DIR))


def parse_args():
    parser = argparse.ArgumentParser(
        description="Recruiting API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=8000,
        help="Port (default: 8000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes (default: 1)"
    )
    return parser.parse_args()


def check_env():
    """检查环境：缺少 .env 时从 .env.example 复制，缺少数据目录时创建"""
    env_file = ROOT_DIR / ".env"
    env_example = ROOT_DIR / ".env.example"

    if not env_file.exists():
        if env_example.exists():
            print("No .env found, copying .env.example")
            shutil.copy(env_example, env_file)
        else:
            print("No .env found, using defaults")

    data_dir = ROOT_DIR / "data"
    if not data_dir.exists():
        data_dir.mkdir(parents=True)
        print(f"Created data directory: {data_dir}")


def main():
    args = parse_args()

    print("=" * 50)
    print("  Recruiting API")
    print("=" * 50)

    check_env()

    print(f"\n  Address: http://{args.host}:{args.port}")
    print(f"  Docs:    http://{args.host}:{args.port}/docs")
    print(f"  Reload:  {'on' if args.reload else 'off'}")
    print(f"  Workers: {args.workers}")
    print("\n" + "-" * 50 + "\n")

    # 会话存储在进程内，多个 worker 之间不共享聊天会话
    if args.workers > 1:
        print("Warning: chat sessions are not shared between workers")

    import uvicorn
    try:
        uvicorn.run(
            "app.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers if not args.reload else 1,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\nServer stopped")


if __name__ == "__main__":
    main()
