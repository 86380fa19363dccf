"""
Power dialer: connects an available agent with the next reachable customer.

Each round pulls up to `dial_ratio` leads and dials them concurrently. The
first attempt to report CONNECTED wins the round and the agent enters the
call. If every attempt of a round fails, a fresh round is started until a
call connects or the lead source runs dry.

Losing attempts of a won round are detached, not awaited: they run to
completion in the background and their outcome is only logged. Routing those
leftover connections to other agents is not handled here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Set

from powerdialer.agent.models import AgentState
from powerdialer.agent.state_machine import Agent
from powerdialer.config import DialerSettings, get_settings
from powerdialer.dialer.models import ConnectResult, DialAttempt
from powerdialer.leads.source import LeadSource
from powerdialer.shared.exceptions import ConfigurationError, DialAttemptFailed
from powerdialer.shared.logging import agent_context, get_logger
from powerdialer.telephony.interface import CallState, DialService


class PowerDialer:
    """Dials leads in concurrent rounds on behalf of a single agent."""

    def __init__(
        self,
        agent: Agent,
        lead_source: LeadSource,
        dial_service: DialService,
        settings: Optional[DialerSettings] = None,
        *,
        dial_ratio: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        settings = settings or get_settings()
        self.dial_ratio = settings.dial_ratio if dial_ratio is None else dial_ratio
        if self.dial_ratio < 1:
            raise ConfigurationError(f"dial_ratio must be >= 1, got {self.dial_ratio}")

        self._agent = agent
        self._lead_source = lead_source
        self._dial_service = dial_service
        self._cancel_losing_attempts = settings.cancel_losing_attempts
        self._logger = logger or get_logger(__name__)
        self._pending: Set[asyncio.Task[str]] = set()
        self._detached: Set[asyncio.Task[str]] = set()

    @property
    def agent(self) -> Agent:
        return self._agent

    @property
    def pending_attempts(self) -> Set[asyncio.Task[str]]:
        """Dial attempts still running, including detached stragglers."""
        return {task for task in self._pending if not task.done()}

    async def connect(self) -> ConnectResult:
        """Connect the agent with the next customer.

        Raises:
            IllegalStateTransition: If the agent is not AVAILABLE.
        """
        with agent_context(self._agent.agent_id):
            self._agent.require_state(AgentState.AVAILABLE)

            rounds = 0
            dialed: List[str] = []
            failed: List[DialAttempt] = []
            while True:
                leads = self._fetch_leads()
                if not leads:
                    self._logger.info(
                        "No leads left to dial for agent %s", self._agent.agent_id
                    )
                    self._agent.finish_dialing()
                    return ConnectResult(
                        rounds=rounds, dialed=dialed, failed=failed, exhausted=True
                    )

                rounds += 1
                self._agent.begin_dialing()
                dialed.extend(leads)
                self._logger.debug(
                    "Dialing round %d for agent %s",
                    rounds,
                    self._agent.agent_id,
                    extra={"leads": leads},
                )

                winner = await self._run_round(leads, failed)
                if winner is not None:
                    self._agent.call_started(winner)
                    return ConnectResult(
                        connected_number=winner, rounds=rounds, dialed=dialed, failed=failed
                    )
                # every attempt failed; try a new batch

    async def wait_pending(self) -> None:
        """Wait until every detached dial attempt has finished.

        Attempts of a round that is still being decided are left alone.
        """
        while True:
            detached = self._running_detached()
            if not detached:
                return
            await asyncio.gather(*detached, return_exceptions=True)

    async def cancel_pending(self) -> None:
        """Cancel detached dial attempts and wait for them to unwind."""
        for task in self._running_detached():
            task.cancel()
        await self.wait_pending()

    def _running_detached(self) -> Set[asyncio.Task[str]]:
        return {task for task in self._detached if not task.done()}

    def _fetch_leads(self) -> List[str]:
        # the source may hold fewer than dial_ratio leads
        leads: List[str] = []
        for _ in range(self.dial_ratio):
            lead = self._lead_source.next_lead()
            if lead is None:
                break
            leads.append(lead)
        return leads

    async def _run_round(self, leads: List[str], failed: List[DialAttempt]) -> Optional[str]:
        tasks = [self._launch(lead) for lead in leads]
        numbers: Dict[asyncio.Task[str], str] = dict(zip(tasks, leads))
        pending: Set[asyncio.Task[str]] = set(tasks)

        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                winner: Optional[str] = None
                # submission order decides between attempts finishing together
                for task in tasks:
                    if task not in done:
                        continue
                    if task.cancelled():
                        failed.append(DialAttempt(numbers[task], error="cancelled"))
                        continue
                    exc = task.exception()
                    if exc is None:
                        if winner is None:
                            winner = task.result()
                        else:
                            self._log_unused_connection(task.result())
                    else:
                        failed.append(self._to_attempt(numbers[task], exc))

                if winner is not None:
                    await self._release_losers(pending)
                    return winner
        except asyncio.CancelledError:
            for task in pending:
                task.cancel()
            # wait_pending() lets the host join them while they unwind
            self._detached.update(task for task in pending if not task.done())
            self._agent.finish_dialing()
            raise
        return None

    def _launch(self, phone_number: str) -> asyncio.Task[str]:
        task = asyncio.create_task(self._dial(phone_number), name=f"dial:{phone_number}")
        self._pending.add(task)
        task.add_done_callback(self._on_attempt_done)
        return task

    async def _dial(self, phone_number: str) -> str:
        agent_id = self._agent.agent_id
        try:
            call_state = await self._dial_service.dial(agent_id, phone_number)
        except Exception as exc:
            msg = f'Dialing "{phone_number}" for agent "{agent_id}" failed. Error: "{exc}"'
            self._logger.error(msg)
            raise DialAttemptFailed(msg, phone_number, cause=exc) from exc

        if call_state == CallState.CONNECTED:
            return phone_number

        msg = (
            f'Failed dialing "{phone_number}" for agent "{agent_id}" failed. '
            f'Call ended in state: "{call_state!s}"'
        )
        self._logger.warning(msg)
        raise DialAttemptFailed(msg, phone_number, call_state=call_state)

    async def _release_losers(self, losers: Set[asyncio.Task[str]]) -> None:
        if not self._cancel_losing_attempts:
            self._detached.update(losers)
            return
        for task in losers:
            task.cancel()
        if losers:
            await asyncio.gather(*losers, return_exceptions=True)

    def _on_attempt_done(self, task: asyncio.Task[str]) -> None:
        self._pending.discard(task)
        detached = task in self._detached
        self._detached.discard(task)
        if task.cancelled():
            return
        # retrieve the outcome so failed stragglers are not reported as unhandled
        exc = task.exception()
        if detached and exc is None:
            self._log_unused_connection(task.result())

    def _log_unused_connection(self, phone_number: str) -> None:
        self._logger.info(
            'Connection to "%s" for agent "%s" is unused: the round was already won',
            phone_number,
            self._agent.agent_id,
        )

    @staticmethod
    def _to_attempt(phone_number: str, exc: BaseException) -> DialAttempt:
        if isinstance(exc, DialAttemptFailed):
            cause = exc.cause
            return DialAttempt(
                phone_number=phone_number,
                call_state=exc.call_state,
                error=str(cause) if cause is not None else exc.message,
            )
        return DialAttempt(phone_number=phone_number, error=str(exc))
