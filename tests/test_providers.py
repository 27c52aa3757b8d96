import asyncio
import copy
import json
import os

import pytest

from bookmark_guard.errors import ProviderOperationError
from bookmark_guard.models import CanonicalNode, NodeKind, TreeEventKind
from bookmark_guard.providers import ChromiumBookmarksProvider, InMemoryTreeProvider

TOOLBAR = "toolbar_____"

CHROMIUM_BOOKMARKS = {
    "checksum": "0123456789abcdef",
    "roots": {
        "bookmark_bar": {
            "children": [
                {"date_added": "13300000000000000", "guid": "g-4", "id": "4",
                 "name": "Python", "type": "url", "url": "https://www.python.org/"},
                {"children": [
                    {"date_added": "13300000000000000", "guid": "g-6", "id": "6",
                     "name": "Docs", "type": "url", "url": "https://docs.python.org/"}
                ],
                 "date_added": "13300000000000000", "date_modified": "13300000000000000",
                 "guid": "g-5", "id": "5", "name": "Reading", "type": "folder"}
            ],
            "date_added": "13300000000000000", "date_modified": "13300000000000000",
            "guid": "g-1", "id": "1", "name": "Bookmarks bar", "type": "folder"
        },
        "other": {"children": [], "date_added": "13300000000000000", "guid": "g-2",
                  "id": "2", "name": "Other bookmarks", "type": "folder"},
        "synced": {"children": [], "date_added": "13300000000000000", "guid": "g-3",
                   "id": "3", "name": "Mobile bookmarks", "type": "folder"}
    },
    "version": 1
}


@pytest.fixture
def bookmarks_file(tmp_path):
    path = tmp_path / "Bookmarks"
    path.write_text(json.dumps(CHROMIUM_BOOKMARKS), encoding="utf-8")
    return path


@pytest.fixture
def provider():
    memory = InMemoryTreeProvider()
    memory.seed(TOOLBAR, [
        CanonicalNode(kind=NodeKind.LINK, title="A", url="a"),
        CanonicalNode(kind=NodeKind.FOLDER, title="F", children=(
            CanonicalNode(kind=NodeKind.LINK, title="x", url="u"),
        )),
        CanonicalNode(kind=NodeKind.SEPARATOR),
    ])
    return memory


def titles(nodes):
    return [node.title for node in nodes]


def test_memory_create_and_move(provider):
    async def scenario():
        appended = await provider.create(TOOLBAR, None, "End", url="https://end")
        folder = await provider.create(TOOLBAR, 1, "New folder")
        assert (appended.kind, appended.index) == ("link", 3)
        assert (folder.kind, folder.index) == ("folder", 1)

        await provider.move(appended.id, 0)
        children = await provider.get_children(TOOLBAR)
        assert titles(children) == ["End", "A", "New folder", "F", ""]
        assert [child.index for child in children] == [0, 1, 2, 3, 4]

        # Moving forward leaves the item at exactly the requested index
        await provider.move(appended.id, 3)
        assert titles(await provider.get_children(TOOLBAR)) == ["A", "New folder", "F", "End", ""]

    asyncio.run(scenario())


def test_memory_remove_tree_drops_descendants(provider):
    async def scenario():
        folder = (await provider.get_children(TOOLBAR))[1]
        [inner] = await provider.get_children(folder.id)

        await provider.remove_tree(folder.id)

        assert titles(await provider.get_children(TOOLBAR)) == ["A", ""]
        with pytest.raises(ProviderOperationError):
            await provider.get_children(inner.id)

    asyncio.run(scenario())


def test_memory_rejects_invalid_operations(provider):
    async def scenario():
        link = (await provider.get_children(TOOLBAR))[0]
        with pytest.raises(ProviderOperationError):
            await provider.create(link.id, 0, "child of a link", url="https://x")
        with pytest.raises(ProviderOperationError):
            await provider.create(provider.tree_root_id, 0, "extra root")
        with pytest.raises(ProviderOperationError):
            await provider.move(TOOLBAR, 2)
        with pytest.raises(ProviderOperationError):
            await provider.remove_tree("does-not-exist")
        with pytest.raises(ProviderOperationError):
            await provider.create(TOOLBAR, 0, "odd", kind="livemark")

    asyncio.run(scenario())


def test_memory_events_reach_listeners(provider):
    received = []

    async def listener(event):
        received.append(event.kind)

    async def scenario():
        provider.add_listener(listener)
        created = await provider.create(TOOLBAR, 0, "New", url="https://new")
        await provider.move(created.id, 2)
        await provider.update(created.id, title="Renamed")
        await provider.remove_tree(created.id)
        await provider.drain_events()
        provider.remove_listener(listener)
        await provider.create(TOOLBAR, 0, "Unheard", url="https://quiet")
        await provider.drain_events()

    asyncio.run(scenario())

    assert received == [TreeEventKind.CREATED, TreeEventKind.MOVED,
                        TreeEventKind.CHANGED, TreeEventKind.REMOVED]


def test_chromium_loads_roots_and_children(bookmarks_file):
    chromium = ChromiumBookmarksProvider(str(bookmarks_file))

    async def scenario():
        tree = await chromium.get_tree()
        assert [root.id for root in tree.children] == ["1", "2", "3"]
        bar = await chromium.get_children("1")
        assert [(node.id, node.kind, node.title) for node in bar] == [
            ("4", "link", "Python"), ("5", "folder", "Reading")]
        assert bar[0].url == "https://www.python.org/"
        assert titles(await chromium.get_children("5")) == ["Docs"]

    asyncio.run(scenario())


def test_chromium_writes_changes_back(bookmarks_file):
    chromium = ChromiumBookmarksProvider(str(bookmarks_file))

    async def scenario():
        created = await chromium.create("1", 0, "PyPI", url="https://pypi.org/")
        await chromium.remove_tree("5")
        return created

    created = asyncio.run(scenario())

    document = json.loads(bookmarks_file.read_text(encoding="utf-8"))
    assert "checksum" not in document
    bar = document["roots"]["bookmark_bar"]["children"]
    assert [node["name"] for node in bar] == ["PyPI", "Python"]
    assert bar[0]["id"] == created.id
    assert bar[0]["type"] == "url"
    assert bar[0]["guid"]
    # Metadata of untouched items survives the rewrite
    assert bar[1]["guid"] == "g-4"
    assert document["roots"]["other"]["name"] == "Other bookmarks"


def test_chromium_cannot_store_separators(bookmarks_file):
    chromium = ChromiumBookmarksProvider(str(bookmarks_file))

    async def scenario():
        with pytest.raises(ProviderOperationError):
            await chromium.create("1", 0, "", kind="separator")
        assert titles(await chromium.get_children("1")) == ["Python", "Reading"]

    asyncio.run(scenario())


def test_chromium_poll_picks_up_outside_edits(bookmarks_file):
    chromium = ChromiumBookmarksProvider(str(bookmarks_file))
    received = []

    async def listener(event):
        received.append(event.kind)

    chromium.add_listener(listener)

    async def poll():
        changed = await chromium.poll()
        await chromium.drain_events()
        return changed

    assert asyncio.run(poll()) is False

    edited = copy.deepcopy(CHROMIUM_BOOKMARKS)
    edited["roots"]["other"]["children"].append(
        {"id": "9", "name": "Outside", "type": "url", "url": "https://outside/"})
    bookmarks_file.write_text(json.dumps(edited), encoding="utf-8")
    stat = bookmarks_file.stat()
    os.utime(bookmarks_file, (stat.st_atime, stat.st_mtime + 10))

    assert asyncio.run(poll()) is True
    assert received == [TreeEventKind.CHANGED]
    assert titles(asyncio.run(chromium.get_children("2"))) == ["Outside"]


def test_chromium_missing_file(tmp_path):
    with pytest.raises(ProviderOperationError):
        ChromiumBookmarksProvider(str(tmp_path / "Bookmarks"))
