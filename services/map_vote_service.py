"""
Map vote orchestration.

Drives a VoteSession through lobby selection, filter selection, the timed
ballot and resolution. All user-facing I/O goes through an IMapVotePrompter,
so the flow can be exercised without Discord.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from domain.models.lobby import Lobby, lobby_key
from domain.models.map_catalog import GAMEMODE_TAGS, LOBBY_SIZE_TAGS, MapCatalog
from domain.models.map_vote import VoteSession, VoteStep
from domain.services.map_selection_service import MapSelectionService
from services import error_codes
from services.interfaces import IMapVotePrompter
from services.lobby_registry import LobbyRegistry
from services.result import Result

logger = logging.getLogger("lobby_bot.services.map_vote")


class MapVoteService:
    """Runs map votes for lobby hosts. At most one vote per lobby at a time."""

    def __init__(
        self,
        registry: LobbyRegistry,
        catalog: MapCatalog,
        selection: MapSelectionService | None = None,
        selection_timeout: float = 60,
        filter_timeout: float = 60,
        vote_window: float = 30,
        candidate_count: int = 3,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.catalog = catalog
        self.selection = selection or MapSelectionService()
        self.selection_timeout = selection_timeout
        self.filter_timeout = filter_timeout
        self.vote_window = vote_window
        self.candidate_count = candidate_count
        self.clock = clock
        self._active: set[tuple[int, str]] = set()

    def is_running(self, guild_id: int, lobby_id: str) -> bool:
        return (guild_id, lobby_key(lobby_id)) in self._active

    async def run(
        self,
        guild_id: int,
        host_id: int,
        prompter: IMapVotePrompter,
        lobby_id: str | None = None,
    ) -> Result[VoteSession]:
        """
        Run one map vote to completion.

        Args:
            guild_id: Guild the vote runs in
            host_id: User who started the vote; must host the target lobby
            prompter: Adapter that asks the host and collects votes
            lobby_id: Skip lobby selection and vote for this lobby

        Returns:
            Result with the resolved VoteSession, or a failure whose code names
            the step that stopped it.
        """
        hosted = self.registry.hosted_by(guild_id, host_id)
        if not hosted:
            return Result.fail(
                "You are not hosting any lobbies.", code=error_codes.NO_HOSTED_LOBBIES
            )

        session = VoteSession(guild_id=guild_id, host_id=host_id)

        if lobby_id is not None:
            chosen = lobby_id
        elif len(hosted) == 1:
            chosen = hosted[0].lobby_id
        else:
            chosen = await self._ask(prompter.choose_lobby(session, hosted), self.selection_timeout)
            if chosen is None:
                return await self._abort(
                    session,
                    prompter,
                    "Lobby selection timed out. Please try again.",
                    error_codes.SELECTION_TIMED_OUT,
                )

        lobby = self._hosted_lobby(guild_id, host_id, chosen)
        if lobby is None:
            return await self._abort(
                session,
                prompter,
                f"You are not hosting a lobby named **{chosen}**.",
                error_codes.LOBBY_NOT_FOUND,
            )

        if self.is_running(guild_id, lobby.lobby_id):
            return await self._abort(
                session,
                prompter,
                f"A map vote is already running for **{lobby.lobby_id}**.",
                error_codes.VOTE_IN_PROGRESS,
            )
        ref = (guild_id, lobby.key)
        self._active.add(ref)
        try:
            return await self._run_for_lobby(session, lobby, prompter)
        finally:
            self._active.discard(ref)

    async def _run_for_lobby(
        self, session: VoteSession, lobby: Lobby, prompter: IMapVotePrompter
    ) -> Result[VoteSession]:
        session.lobby_id = lobby.lobby_id
        session.channel_id = lobby.channel_id
        session.step = VoteStep.SELECTING_FILTERS

        sizes = await self._ask(prompter.choose_sizes(session), self.filter_timeout)
        if sizes is None:
            return await self._abort(
                session, prompter, "Filter selection timed out.", error_codes.FILTERS_TIMED_OUT
            )
        session.sizes = [s for s in sizes if s in LOBBY_SIZE_TAGS]

        gamemodes = await self._ask(prompter.choose_gamemodes(session), self.filter_timeout)
        if gamemodes is None:
            return await self._abort(
                session, prompter, "Filter selection timed out.", error_codes.FILTERS_TIMED_OUT
            )
        session.gamemodes = [g for g in gamemodes if g in GAMEMODE_TAGS]

        if not session.sizes or not session.gamemodes:
            return await self._abort(
                session,
                prompter,
                "Please select at least one lobby size and one gamemode.",
                error_codes.INVALID_FILTER,
            )

        matches = self.selection.filter_maps(self.catalog, session.sizes, session.gamemodes)
        if not matches:
            return await self._abort(
                session,
                prompter,
                "No maps found matching the selected lobby sizes and gamemodes.",
                error_codes.NO_MATCHING_MAPS,
            )

        candidates = self.selection.sample_candidates(matches, self.candidate_count)
        session.open_voting(candidates, deadline=self.clock() + self.vote_window)
        logger.info(
            f"Map vote opened for lobby '{lobby.lobby_id}' in guild {session.guild_id} "
            f"with {len(candidates)} candidates"
        )

        try:
            await prompter.open_ballot(session)
            await asyncio.sleep(self.vote_window)
            counts = await prompter.close_ballot(session)
            session.record_counts(counts, seeded=prompter.seeds_markers)
            session.resolve(self.selection.pick_winner(session.candidates, session.tallies))
            await prompter.announce(session)
        except Exception as exc:
            logger.error(f"Map vote for lobby '{lobby.lobby_id}' failed: {exc}", exc_info=True)
            try:
                await prompter.report_error(session)
            except Exception as report_exc:
                logger.warning(f"Could not report map vote failure: {report_exc}")
            session.outcome = None
            return await self._abort(
                session,
                prompter,
                "An error occurred while processing the map vote.",
                error_codes.RENDER_FAILURE,
                force=True,
            )

        logger.info(
            f"Map vote for lobby '{lobby.lobby_id}' resolved: {session.outcome.map.name} "
            f"({session.outcome.votes} votes, random={session.outcome.randomly_chosen})"
        )
        return Result.ok(session)

    def _hosted_lobby(self, guild_id: int, host_id: int, lobby_id: str) -> Lobby | None:
        lobby = self.registry.get(guild_id, lobby_id)
        if lobby is None or lobby.host_id != host_id:
            return None
        return lobby

    @staticmethod
    async def _ask(prompt: Awaitable, timeout: float):
        """Await a prompter step under a deadline. None on timeout."""
        try:
            return await asyncio.wait_for(prompt, timeout=timeout)
        except asyncio.TimeoutError:
            return None

    async def _abort(
        self,
        session: VoteSession,
        prompter: IMapVotePrompter,
        message: str,
        code: str,
        force: bool = False,
    ) -> Result[VoteSession]:
        if force:
            session.step = VoteStep.ABORTED
            session.abort_reason = code
        else:
            session.abort(code)
        logger.info(f"Map vote in guild {session.guild_id} aborted: {code}")
        try:
            await prompter.clear(session, code)
        except Exception as exc:
            logger.warning(f"Could not clear map vote prompts: {exc}")
        return Result.fail(message, code=code)
