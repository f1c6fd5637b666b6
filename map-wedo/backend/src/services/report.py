from __future__ import annotations

from typing import List

from models import ALL_CATEGORIES, CATEGORIES, Card, ViewList

_LABELS = {c["id"]: c["label"] for c in CATEGORIES}
_LABELS[ALL_CATEGORIES] = "全部 All"


def build_listing(view: ViewList, cards: List[Card]) -> str:
    header = [
        "## Map WEDO",
        "",
        f"- 分類 Category: {_LABELS.get(view.category, view.category)}",
        f"- 搜尋 Search: {view.search or 'None'}",
        f"- 標籤 Tag: {('#' + view.tag) if view.tag else '全部 All'}",
        f"- Showing {len(view.items)} of {view.total} (page {view.page}, {view.page_size} per page)",
    ]
    if view.available_tags:
        header.append("- Tags: " + " ".join(f"#{t}" for t in view.available_tags))
    header.append("")

    lines = header
    if not cards:
        lines += [
            "### 沒有找到相關地點",
            "試試看搜尋其他關鍵字或切換分類",
        ]
        return "\n".join(lines)

    for idx, card in enumerate(cards, start=1):
        title = f"#### {idx}. {card.name}"
        if card.distance_label:
            title += f" ({card.distance_label})"
        lines.append(title)
        if card.address_line:
            lines.append(f"- Address: {card.address_line}")
        if card.description:
            lines.append(f"- {card.description}")
        tags = " ".join([card.category] + [f"#{t}" for t in card.tags])
        lines.append(f"- Tags: {tags}")
        lines.append(f"- Map: [View map]({card.map_url})")
        lines.append("")

    if view.remaining > 0:
        lines.append(f"載入更多 Load more ({view.remaining})")

    return "\n".join(lines).rstrip() + "\n"
