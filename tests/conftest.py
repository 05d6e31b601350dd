"""Shared fixtures for coauthor tests."""

import json
from datetime import datetime, timezone

import pytest

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


REACT_COMPONENT = """import React from 'react';

export const Component: React.FC = () => {
  const [state, setState] = React.useState(0);

  const handleClick = () => {
    setState(prev => prev + 1);
  };

  return (
    <div onClick={handleClick}>
      Count: {state}
    </div>
  );
};"""

REACT_COMPONENT_RENAMED = """import React from 'react';

export const MyComponent: React.FC = () => {
  const [count, setCount] = React.useState(0);

  const handleIncrement = () => {
    setCount(prev => prev + 1);
  };

  return (
    <div onClick={handleIncrement}>
      Counter: {count}
    </div>
  );
};"""

ARITHMETIC = """const x = 42;
const y = x * 2;
console.log("Result:", y);"""


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def react_component():
    return REACT_COMPONENT


@pytest.fixture
def react_component_renamed():
    return REACT_COMPONENT_RENAMED


@pytest.fixture
def arithmetic():
    return ARITHMETIC


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a snapshot record under tmp_path/.cursor-changes/<branch>/<date>/."""

    def _write(name, age, changes, branch="main", raw=None, timestamp=...):
        when = NOW - age
        date_dir = tmp_path / ".cursor-changes" / branch / when.strftime("%Y-%m-%d")
        date_dir.mkdir(parents=True, exist_ok=True)
        path = date_dir / f"{name}.json"
        if raw is not None:
            path.write_text(raw, encoding="utf-8")
            return path
        record = {"branch": branch, "changes": changes}
        if timestamp is ...:
            record["timestamp"] = when.strftime("%Y-%m-%dT%H:%M:%S.000Z")
        elif timestamp is not None:
            record["timestamp"] = timestamp
        path.write_text(json.dumps(record), encoding="utf-8")
        return path

    return _write
