"""Tests for the player state machine, driven through a fake node player."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from pycadence.enums.player import LoopState, PlayerState
from pycadence.events import (
    DebugEvent,
    PlayerClosedEvent,
    PlayerDestroyEvent,
    PlayerEmptyEvent,
    PlayerEndEvent,
    PlayerExceptionEvent,
    PlayerRateLimitedEvent,
    PlayerResolveErrorEvent,
    PlayerResumedEvent,
    PlayerStartEvent,
    PlayerStuckEvent,
    PlayerUpdateEvent,
    QueueUpdatedEvent,
)
from pycadence.exceptions.base import InvalidArgumentException, InvalidStateException, RemoteOperationFailedException
from pycadence.exceptions.player import (
    NoCurrentTrackException,
    PlayerAlreadyInitializedException,
    PlayerDestroyedException,
    TrackNotSeekableException,
)
from pycadence.exceptions.track import TrackNotFoundException, TrackResolveException
from pycadence.filters import Equalizer, Timescale
from tests.conftest import GUILD_ID, make_track, raw_track


def _tracks(count: int, prefix: str = "t"):
    return [make_track(f"{prefix}{i}") for i in range(count)]


def _of_type(events: list, event_type: type) -> list:
    return [event for event in events if isinstance(event, event_type)]


def _end(track_id: str, reason: str = "finished") -> dict:
    return {"op": "event", "type": "TrackEndEvent", "guildId": str(GUILD_ID), "track": raw_track(track_id), "reason": reason}


def _exception() -> dict:
    return {
        "op": "event",
        "type": "TrackExceptionEvent",
        "guildId": str(GUILD_ID),
        "exception": {"severity": "common", "message": "video unavailable", "cause": "unavailable"},
    }


def _stuck() -> dict:
    return {"op": "event", "type": "TrackStuckEvent", "guildId": str(GUILD_ID), "thresholdMs": 10_000}


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_init_applies_volume_and_subscribes(self, player, node_player) -> None:
        assert player.state is PlayerState.CONNECTED
        assert player.connected_at is not None
        node_player.set_global_volume.assert_awaited_once_with(100)
        assert set(node_player.listeners) == {"start", "end", "exception", "stuck", "update", "closed", "resumed"}

    @pytest.mark.asyncio
    async def test_init_twice_is_refused(self, player) -> None:
        with pytest.raises(PlayerAlreadyInitializedException):
            await player.init()

    @pytest.mark.asyncio
    async def test_destroy_tears_everything_down(self, client, player, node_player, gateway, events) -> None:
        player.queue.add(_tracks(3))
        player.data["key"] = "value"
        await player.destroy()

        assert player.state is PlayerState.DESTROYED
        assert client.get_player(GUILD_ID) is None
        assert len(player.queue) == 0
        assert player.data == {}
        assert not any(node_player.listeners.values())
        gateway.leave_voice_channel.assert_awaited_once_with(GUILD_ID)
        assert len(_of_type(events, PlayerDestroyEvent)) == 1

    @pytest.mark.asyncio
    async def test_destroy_twice_raises(self, client, player) -> None:
        await client.destroy_player(GUILD_ID)
        assert client.get_player(GUILD_ID) is None
        with pytest.raises(InvalidStateException):
            await player.destroy()

    @pytest.mark.asyncio
    async def test_destroy_survives_a_failed_leave(self, client, player, gateway) -> None:
        gateway.leave_voice_channel.side_effect = RuntimeError("gateway down")
        await player.destroy()
        assert player.state is PlayerState.DESTROYED
        assert client.get_player(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_operations_after_destroy_raise(self, player) -> None:
        await player.destroy()
        with pytest.raises(PlayerDestroyedException):
            await player.skip()
        with pytest.raises(PlayerDestroyedException):
            player.set_loop(LoopState.QUEUE)

    @pytest.mark.asyncio
    async def test_node_events_after_destroy_are_ignored(self, player, node_player, events) -> None:
        await player.play(_tracks(1))
        listener = node_player.listeners["end"][0]
        await player.destroy()
        listener(_end("t0"))
        assert player.sequencer.pending == []
        assert not _of_type(events, PlayerEndEvent)


class TestPlay:
    @pytest.mark.asyncio
    async def test_play_then_auto_advance(self, player, node_player, events) -> None:
        a, b = _tracks(2)
        await player.play([a, b])
        assert player.current is a
        assert player.queue.current_id == 0
        node_player.play_track.assert_awaited_once_with(track=a.encoded, options={"noReplace": False})

        node_player.emit("start", {"op": "event", "type": "TrackStartEvent", "track": raw_track("t0")})
        await player.sequencer.wait_until_idle()
        assert player.playing
        assert _of_type(events, PlayerStartEvent)[0].track is a

        node_player.emit("end", _end("t0"))
        await player.sequencer.wait_until_idle()
        assert player.current is b
        assert player.queue.current_id == 1
        assert node_player.played() == [a.encoded, b.encoded]
        end = _of_type(events, PlayerEndEvent)[0]
        assert end.track is a

    @pytest.mark.asyncio
    async def test_queue_drains_after_last_track(self, player, node_player, events) -> None:
        await player.play(_tracks(1))
        node_player.emit("end", _end("t0"))
        await player.sequencer.wait_until_idle()
        assert player.current is None
        assert player.queue.current_id == 1
        assert len(_of_type(events, PlayerEmptyEvent)) == 1

    @pytest.mark.asyncio
    async def test_play_with_nothing_raises(self, player) -> None:
        with pytest.raises(TrackNotFoundException):
            await player.play()

    @pytest.mark.asyncio
    async def test_play_rejects_non_tracks(self, player) -> None:
        with pytest.raises(InvalidArgumentException):
            await player.play(["nope"])

    @pytest.mark.asyncio
    async def test_play_options_reach_the_node(self, player, node_player) -> None:
        await player.play(_tracks(1), pause=True, start_time=1_000, end_time=5_000)
        node_player.play_track.assert_awaited_once_with(
            track="encoded-t0", options={"noReplace": False, "pause": True, "startTime": 1_000, "endTime": 5_000}
        )
        assert player.paused
        assert player.position == 1_000

    @pytest.mark.asyncio
    async def test_play_while_sounding_plays_new_track_next_to_current(self, player, node_player) -> None:
        a, b, c = _tracks(3)
        await player.play([a, b])
        await player.play(c)
        assert [t.identifier for t in player.queue] == ["t0", "t2", "t1"]
        assert player.queue.current_id == 1
        assert player.current is c

        node_player.emit("end", _end("t0", reason="replaced"))
        await player.sequencer.wait_until_idle()
        assert player.current is c
        assert node_player.played() == [a.encoded, c.encoded]

    @pytest.mark.asyncio
    async def test_play_replace_current(self, player) -> None:
        a, b, c = _tracks(3)
        await player.play([a, b])
        await player.play(c, replace_current=True)
        assert [t.identifier for t in player.queue] == ["t2", "t1"]
        assert player.current is c

    @pytest.mark.asyncio
    async def test_no_replace_only_queues(self, player, node_player) -> None:
        a, b = _tracks(2)
        await player.play(a)
        await player.play(b, no_replace=True)
        assert player.current is a
        assert list(player.queue) == [a, b]
        assert node_player.play_track.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_play_restores_current(self, player, node_player) -> None:
        a, b = _tracks(2)
        await player.play(a)
        node_player.play_track.side_effect = RuntimeError("node refused")
        with pytest.raises(RemoteOperationFailedException):
            await player.play(b)
        assert player.current is a

    @pytest.mark.asyncio
    async def test_resolve_failure_reports_and_skips(self, player, node_player, node, events) -> None:
        node.rest.resolve.return_value = {"loadType": "empty", "data": None}
        bad = make_track("sp", source="spotify", uri="https://open.spotify.com/track/sp")
        good = make_track("ok")
        with pytest.raises(TrackResolveException):
            await player.play([bad, good])
        await player.sequencer.wait_until_idle()

        errors = _of_type(events, PlayerResolveErrorEvent)
        assert len(errors) == 1
        assert errors[0].track is bad
        assert player.current is good
        assert node_player.played() == [good.encoded]

    @pytest.mark.asyncio
    async def test_stop_does_not_advance(self, player, node_player) -> None:
        await player.play(_tracks(2))
        await player.stop()
        node_player.stop_track.assert_awaited_once()
        assert player.current is None
        assert player.queue.current_id == 0

    @pytest.mark.asyncio
    async def test_playing_track_cannot_be_spliced_out(self, player, node_player) -> None:
        a, b = _tracks(2)
        await player.play([a, b])
        with pytest.raises(InvalidArgumentException):
            player.queue.splice(player.queue.current_id, 1)
        assert player.queue.current is a
        assert player.current is a

        node_player.emit("end", _end("t0"))
        await player.sequencer.wait_until_idle()
        assert node_player.played() == [a.encoded, b.encoded]

    @pytest.mark.asyncio
    async def test_queue_changes_are_dispatched(self, player, events) -> None:
        player.queue.add(_tracks(1))
        assert len(_of_type(events, QueueUpdatedEvent)) == 1


class TestSkipTo:
    @pytest.fixture
    def loaded(self, player):
        player.queue.add(_tracks(5))
        player.queue.current_id = 2
        return player

    @pytest.mark.asyncio
    async def test_past_the_end_drains(self, loaded, events) -> None:
        await loaded.skipto(10)
        await loaded.sequencer.wait_until_idle()
        assert loaded.queue.current_id == 5
        assert loaded.current is None
        assert len(_of_type(events, PlayerEmptyEvent)) == 1

    @pytest.mark.asyncio
    async def test_in_range(self, loaded, node_player) -> None:
        await loaded.skipto(3)
        assert loaded.queue.current_id == 3
        assert node_player.played() == ["encoded-t3"]

    @pytest.mark.asyncio
    async def test_loop_track_stays(self, loaded, node_player) -> None:
        loaded.set_loop(LoopState.TRACK)
        await loaded.skipto(4)
        assert loaded.queue.current_id == 2
        assert node_player.played() == ["encoded-t2"]

    @pytest.mark.asyncio
    async def test_loop_queue_wraps_at_the_end(self, loaded) -> None:
        loaded.set_loop(LoopState.QUEUE)
        loaded.queue.current_id = 4
        await loaded.skip()
        assert loaded.queue.current_id == 0

    @pytest.mark.asyncio
    async def test_negative_goes_to_last(self, loaded) -> None:
        await loaded.skipto(-3)
        assert loaded.queue.current_id == 4

    @pytest.mark.asyncio
    async def test_previous(self, loaded) -> None:
        await loaded.previous()
        assert loaded.queue.current_id == 1
        loaded.queue.current_id = 0
        with pytest.raises(InvalidArgumentException):
            await loaded.previous()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["1", 1.5, True])
    async def test_non_integer_rejected(self, loaded, value) -> None:
        with pytest.raises(InvalidArgumentException):
            await loaded.skipto(value)


class TestRateLimits:
    @pytest.mark.asyncio
    async def test_exception_limiter(self, player, node_player, clock, events) -> None:
        await player.play(_tracks(10))
        for t in (0, 1, 2, 3):
            clock.now = t
            node_player.emit("exception", _exception())
            await player.sequencer.wait_until_idle()

        assert len(_of_type(events, PlayerExceptionEvent)) == 3
        assert len(_of_type(events, PlayerRateLimitedEvent)) == 1
        # One initial play plus one skip per admitted exception
        assert node_player.play_track.await_count == 4

        clock.now = 10_001
        node_player.emit("exception", _exception())
        await player.sequencer.wait_until_idle()
        assert len(_of_type(events, PlayerExceptionEvent)) == 4

    @pytest.mark.asyncio
    async def test_stuck_limiter(self, player, node_player, clock, events) -> None:
        await player.play(_tracks(10))
        for t in range(5):
            clock.now = t
            node_player.emit("stuck", _stuck())
            await player.sequencer.wait_until_idle()
        stuck = _of_type(events, PlayerStuckEvent)
        assert len(stuck) == 3
        assert stuck[0].track.identifier == "t0"
        assert len(_of_type(events, PlayerRateLimitedEvent)) == 1

    @pytest.mark.asyncio
    async def test_resolve_error_limiter(self, player, node_player, node, events) -> None:
        node.rest.resolve.return_value = {"loadType": "empty", "data": None}
        unplayable = [
            make_track(f"sp{i}", source="spotify", uri=f"https://open.spotify.com/track/sp{i}") for i in range(6)
        ]
        with pytest.raises(TrackResolveException):
            await player.play(unplayable)
        await player.sequencer.wait_until_idle()

        errors = _of_type(events, PlayerResolveErrorEvent)
        assert [e.track.identifier for e in errors] == ["sp0", "sp1", "sp2"]
        assert len(_of_type(events, PlayerRateLimitedEvent)) == 1
        # The fourth failure is suppressed and does not skip
        assert player.queue.current_id == 3
        node_player.play_track.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skip_spam_cools_down_then_destroys(self, client, player, node_player, events) -> None:
        player.queue.add(_tracks(30))
        for _ in range(4):
            await player.skip()
        assert not any("cooling down" in e.message for e in _of_type(events, DebugEvent))

        await player.skip()
        assert sum("cooling down" in e.message for e in _of_type(events, DebugEvent)) == 1

        for _ in range(9):
            await player.skip()
        assert not player.is_destroyed

        await player.skip()
        assert player.state is PlayerState.DESTROYED
        assert client.get_player(GUILD_ID) is None
        assert len(_of_type(events, PlayerDestroyEvent)) == 1


class TestNodeEvents:
    @pytest.mark.asyncio
    async def test_update_tracks_position(self, player, node_player, events) -> None:
        await player.play(_tracks(1))
        node_player.emit(
            "update", {"op": "playerUpdate", "state": {"time": 1, "connected": True, "ping": 5, "position": 42_000}}
        )
        assert player.position == 42_000
        assert len(_of_type(events, PlayerUpdateEvent)) == 1

    @pytest.mark.asyncio
    async def test_update_without_current_is_only_reported(self, player, node_player, events) -> None:
        node_player.emit(
            "update", {"op": "playerUpdate", "state": {"time": 1, "connected": True, "ping": 5, "position": 42_000}}
        )
        assert not _of_type(events, PlayerUpdateEvent)
        assert any("without a current track" in e.message for e in _of_type(events, DebugEvent))

    @pytest.mark.asyncio
    async def test_closed_is_forwarded(self, player, node_player, events) -> None:
        node_player.emit(
            "closed",
            {
                "op": "event",
                "type": "WebSocketClosedEvent",
                "guildId": str(GUILD_ID),
                "code": 4006,
                "reason": "gone",
                "byRemote": True,
            },
        )
        closed = _of_type(events, PlayerClosedEvent)
        assert len(closed) == 1
        assert closed[0].player is player
        assert (closed[0].code, closed[0].reason, closed[0].by_remote) == (4006, "gone", True)

    @pytest.mark.asyncio
    async def test_resumed_is_forwarded(self, player, node_player, events) -> None:
        node_player.emit("resumed")
        resumed = _of_type(events, PlayerResumedEvent)
        assert len(resumed) == 1
        assert resumed[0].player is player

    @pytest.mark.asyncio
    async def test_end_without_current_is_only_reported(self, player, node_player, events) -> None:
        node_player.emit("end", _end("t0"))
        await player.sequencer.wait_until_idle()
        assert not _of_type(events, PlayerEndEvent)
        assert any("without a current track" in e.message for e in _of_type(events, DebugEvent))

    @pytest.mark.asyncio
    async def test_malformed_payload_is_dropped(self, player, node_player) -> None:
        node_player.emit("end", {"op": "event"})
        assert player.sequencer.pending == []

    @pytest.mark.asyncio
    async def test_skip_on_end_can_be_disabled(self, client, player, node_player, options) -> None:
        client._options = dataclasses.replace(options, skip_on_end=False)
        await player.play(_tracks(2))
        node_player.emit("end", _end("t0"))
        await player.sequencer.wait_until_idle()
        assert player.current is None
        assert node_player.play_track.await_count == 1


class TestControls:
    @pytest.mark.asyncio
    async def test_pause_is_a_no_op_when_unchanged_or_empty(self, player, node_player) -> None:
        await player.pause()
        node_player.set_paused.assert_not_awaited()
        await player.play(_tracks(1))
        await player.pause()
        await player.pause()
        node_player.set_paused.assert_awaited_once_with(True)
        await player.resume()
        assert not player.paused

    @pytest.mark.asyncio
    async def test_seek(self, player, node_player) -> None:
        with pytest.raises(NoCurrentTrackException):
            await player.seek(1_000)
        await player.play(_tracks(1))
        await player.seek(500_000)
        node_player.seek_to.assert_awaited_once_with(180_000)
        with pytest.raises(InvalidArgumentException):
            await player.seek(float("nan"))

    @pytest.mark.asyncio
    async def test_seek_stream_refused(self, player) -> None:
        await player.play(make_track("live", is_stream=True, length=0))
        with pytest.raises(TrackNotSeekableException):
            await player.seek(10)

    @pytest.mark.asyncio
    async def test_volume_is_clamped(self, player, node_player) -> None:
        await player.set_global_volume(5_000)
        assert player.volume == 1_000
        await player.set_global_volume(-3)
        assert player.volume == 0
        with pytest.raises(InvalidArgumentException):
            await player.set_global_volume("loud")

    @pytest.mark.asyncio
    async def test_hung_node_call_times_out(self, client, player, node_player, options) -> None:
        client._options = dataclasses.replace(options, remote_timeout=0.01)

        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        node_player.set_global_volume.side_effect = hang
        with pytest.raises(RemoteOperationFailedException):
            await player.set_global_volume(50)
        assert player.volume == 100

    @pytest.mark.asyncio
    async def test_filters(self, player, node_player) -> None:
        await player.set_timescale(Timescale(speed=1.2))
        node_player.set_timescale.assert_awaited_once_with({"speed": 1.2})
        assert player.timescale.speed == 1.2
        await player.set_timescale(None)
        assert player.timescale.off
        with pytest.raises(InvalidArgumentException):
            await player.set_equalizer(Timescale())

    @pytest.mark.asyncio
    async def test_set_filters_sends_changed_filters_only(self, player, node_player) -> None:
        equalizer = Equalizer(levels=[{"band": 0, "gain": 0.3}])
        await player.set_filters(equalizer=equalizer, timescale=Timescale(pitch=1.1))
        payload = node_player.set_filters.await_args.args[0]
        assert set(payload) == {"volume", "equalizer", "timescale"}
        assert payload["timescale"] == {"pitch": 1.1}
        with pytest.raises(InvalidArgumentException):
            await player.set_filters(echo=None)

    @pytest.mark.asyncio
    async def test_set_loop_cycles(self, player) -> None:
        assert player.set_loop() is LoopState.QUEUE
        assert player.set_loop() is LoopState.TRACK
        assert player.set_loop() is LoopState.NONE
        assert player.set_loop("track") is LoopState.TRACK
        with pytest.raises(InvalidArgumentException):
            player.set_loop("forever")

    @pytest.mark.asyncio
    async def test_set_voice_channel_sends_voice_state(self, player, gateway) -> None:
        player.set_voice_channel(9999)
        assert player.voice_id == 9999
        assert player.state is PlayerState.CONNECTED
        gateway.send_packet.assert_called_once_with(
            0,
            {"op": 4, "d": {"guild_id": GUILD_ID, "channel_id": 9999, "self_deaf": False, "self_mute": False}},
            False,
        )

    @pytest.mark.asyncio
    async def test_move_to_least_used_node(self, player, node_player) -> None:
        assert await player.move()
        node_player.move.assert_awaited_once_with("main")
