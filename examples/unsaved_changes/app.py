"""Unsaved changes — a back-navigation guard backed by a confirmation dialog.

An editor page refuses to close while it has unsaved edits unless the
user confirms. The dialog is an async confirmation provider: the pop
stays pending until it answers, and a second back press in the meantime
is rejected.

Demonstrates:
- ``register_guard`` with an ``async def`` guard
- Returning results from a popped page with ``result_of``
- ``GuardBusyError`` for overlapping back presses

Run:
    python app.py
"""

import asyncio
from dataclasses import dataclass, field

from roost import Navigator, PageDescriptor


@dataclass
class Editor:
    text: str = ""
    saved: str = ""

    @property
    def dirty(self) -> bool:
        return self.text != self.saved


@dataclass
class ConfirmDialog:
    """Stand-in for a host dialog: answers arrive through a queue."""

    answers: asyncio.Queue[bool] = field(default_factory=asyncio.Queue)
    asked: int = 0

    async def ask(self) -> bool:
        self.asked += 1
        return await self.answers.get()


def build_navigator() -> Navigator:
    nav = Navigator("Home")
    nav.register_fallback(lambda request: f"Not found: {request.name}")
    return nav


def open_editor(nav: Navigator, dialog: ConfirmDialog) -> Editor:
    editor = Editor()

    async def leave_editor(page: PageDescriptor, result: object) -> bool:
        if not editor.dirty:
            return True
        return await dialog.ask()

    nav.register_guard(editor, leave_editor)
    nav.navigate_to_content(editor)
    return editor


async def main() -> None:
    nav = build_navigator()
    dialog = ConfirmDialog()
    editor = open_editor(nav, dialog)
    editor.text = "draft"

    back = asyncio.create_task(nav.go_back())
    await asyncio.sleep(0)
    print("dialog shown:", dialog.asked == 1)
    await dialog.answers.put(False)
    print("left editor:", await back)


if __name__ == "__main__":
    asyncio.run(main())
