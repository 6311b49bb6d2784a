"""Shared fixtures for levelcode tests."""

import pytest

from levelcode.document import (
    Block, Grid, InternalBlock, InternalRecord, LevelDocument, Metadata, Settings,
)


@pytest.fixture
def valid_level():
    """A raw canonical level tree that passes full validation."""
    return {
        "id": "lvl-1",
        "name": "First Steps",
        "author": "ada",
        "createdAt": 1700000000000,
        "updatedAt": 1700000100000,
        "version": "1.0.0",
        "metadata": {
            "difficulty": "easy",
            "tags": ["intro", "short"],
            "description": "A gentle start",
        },
        "grid": {
            "width": 10,
            "height": 8,
            "blocks": [
                {"x": 0, "y": 0, "type": "normal"},
                {"x": 1, "y": 0, "type": "hard", "health": 3},
                {"x": 2, "y": 1, "type": "power_up", "powerUp": "laser"},
            ],
        },
        "settings": {"ballSpeed": 1.5, "paddleSize": 100, "theme": "neon"},
    }


@pytest.fixture
def sample_document():
    """A valid LevelDocument."""
    return LevelDocument(
        id="lvl-1",
        name="First Steps",
        format_version="1.0.0",
        author="ada",
        created_at=1700000000000,
        updated_at=1700000100000,
        metadata=Metadata(difficulty="easy", tags=("intro", "short"), description="A gentle start"),
        grid=Grid(
            width=10,
            height=8,
            blocks=(
                Block(x=0, y=0, type="normal"),
                Block(x=1, y=0, type="hard", health=3),
                Block(x=2, y=1, type="power_up", power_up="laser"),
            ),
        ),
        settings=Settings(ball_speed=1.5, paddle_size=100, theme="neon"),
    )


@pytest.fixture
def sample_record():
    """An editor record with presentation-only fields on its blocks."""
    return InternalRecord(
        id="rec-7",
        name="Editor Level",
        rows=12,
        cols=16,
        cell_size=32,
        created_at=1700000000000,
        updated_at=1700000500000,
        blocks=(
            InternalBlock(x=0, y=0, type="normal", durability=1, points=100,
                          color="#ff0000", rotation=90.0, metadata={"note": "corner"}),
            InternalBlock(x=3, y=2, type="power_up", durability=2, points=250,
                          power_up="multiball", color="#00ff00"),
            InternalBlock(x=15, y=11, type="indestructible"),
        ),
    )
