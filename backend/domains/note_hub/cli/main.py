#!/usr/bin/env python3
"""
Notepad CLI - 笔记存储的命令行入口

命令:
  list      列出笔记（可按关键词过滤）
  add       新建笔记
  edit      更新笔记标题和描述
  delete    删除笔记
  show      查看单个笔记
  serve     启动 REST API 服务

存储后端由 NOTEPAD_* 环境变量或 .env 决定。
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from domains.core import ApplicationError, LogConfig, LogFormat, configure_logging, reload_settings

from ..persistence import create_gateway
from ..services.note_service import NoteService


# 加载当前目录的 .env 文件
load_dotenv()


async def _run(args, action) -> int:
    """初始化服务、执行操作、等待保存完成后关闭"""
    service = NoteService(gateway=create_gateway(reload_settings()))
    try:
        await service.initialize()
        return action(service, args)
    finally:
        await service.close()


def _print_note(note) -> None:
    print(f"[{note.id}] {note.title}")
    if note.description:
        for line in note.description.splitlines():
            print(f"    {line}")


def cmd_list(service: NoteService, args) -> int:
    """执行 list 命令"""
    notes = service.set_query(args.search) if args.search else service.visible_notes()
    for note in notes:
        _print_note(note)
    print(f"\n共 {len(notes)} / {service.store.count()} 条笔记")
    return 0


def cmd_add(service: NoteService, args) -> int:
    """执行 add 命令"""
    note_id = service.create_note(args.title, args.description)
    print(f"已创建笔记: {note_id}")
    return 0


def cmd_edit(service: NoteService, args) -> int:
    """执行 edit 命令（未指定的字段保持原值）"""
    note = service.get_note(args.id)
    if note is None:
        print(f"笔记不存在: {args.id}", file=sys.stderr)
        return 1
    title = note.title if args.title is None else args.title
    description = note.description if args.description is None else args.description
    service.update_note(args.id, title, description)
    print(f"已更新笔记: {args.id}")
    return 0


def cmd_delete(service: NoteService, args) -> int:
    """执行 delete 命令"""
    if not service.delete_note(args.id):
        print(f"笔记不存在: {args.id}", file=sys.stderr)
        return 1
    print(f"已删除笔记: {args.id}")
    return 0


def cmd_show(service: NoteService, args) -> int:
    """执行 show 命令"""
    note = service.get_note(args.id)
    if note is None:
        print(f"笔记不存在: {args.id}", file=sys.stderr)
        return 1
    _print_note(note)
    return 0


def cmd_serve(args) -> int:
    """执行 serve 命令"""
    from app.main import run
    run()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='notepad',
        description='笔记存储命令行工具',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='输出调试日志')
    subparsers = parser.add_subparsers(dest='command', help='子命令')

    # list
    p_list = subparsers.add_parser('list', help='列出笔记')
    p_list.add_argument('--search', '-s', default='', help='搜索关键词（标题或描述，不区分大小写）')
    p_list.set_defaults(action=cmd_list)

    # add
    p_add = subparsers.add_parser('add', help='新建笔记')
    p_add.add_argument('title', help='标题')
    p_add.add_argument('description', nargs='?', default='', help='描述')
    p_add.set_defaults(action=cmd_add)

    # edit
    p_edit = subparsers.add_parser('edit', help='更新笔记')
    p_edit.add_argument('id', type=int, help='笔记 ID')
    p_edit.add_argument('--title', help='新标题')
    p_edit.add_argument('--description', help='新描述')
    p_edit.set_defaults(action=cmd_edit)

    # delete
    p_delete = subparsers.add_parser('delete', help='删除笔记')
    p_delete.add_argument('id', type=int, help='笔记 ID')
    p_delete.set_defaults(action=cmd_delete)

    # show
    p_show = subparsers.add_parser('show', help='查看笔记')
    p_show.add_argument('id', type=int, help='笔记 ID')
    p_show.set_defaults(action=cmd_show)

    # serve
    p_serve = subparsers.add_parser('serve', help='启动 REST API 服务')
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if hasattr(args, 'func'):
        return args.func(args)

    configure_logging(LogConfig(
        level="DEBUG" if args.verbose else "WARNING",
        format=LogFormat.CONSOLE,
        service_name="notepad-cli",
    ))

    try:
        return asyncio.run(_run(args, args.action))
    except ApplicationError as e:
        print(f"错误: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
