"""Collision detection and resolution between entities.

Handles player-enemy contacts (time penalties) and enemy-enemy
deflection. The arbiter holds no entities between ticks; it works on the
collections the session passes in.

Scaling limit: the pairwise scan is O(n^2). That is fine for the bounded
enemy count (MAX_ENEMY_COUNT, 10 by default); raising the cap by an
order of magnitude would call for a uniform grid or sweep-and-prune
broad phase in front of check_overlap().
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from timeracers.countdown import Countdown
    from timeracers.entities.entity import Entity


def check_overlap(a: 'Entity', b: 'Entity') -> bool:
    """Check whether two entities' hitboxes overlap.

    Args:
        a: First entity
        b: Second entity

    Returns:
        True if the hitboxes share interior area
    """
    return a.hitbox.overlaps(b.hitbox)


@dataclass
class CollisionReport:
    """What the arbiter did during one tick."""
    penalized: List['Entity'] = field(default_factory=list)
    player_contacts: List['Entity'] = field(default_factory=list)
    enemy_pairs: List[Tuple['Entity', 'Entity']] = field(default_factory=list)

    @property
    def penalty_seconds(self) -> int:
        return sum(e.spec.time_penalty for e in self.penalized)


class CollisionArbiter:
    """Applies the collision policy once per tick.

    Player x Enemy:
        - overlap, not yet collided: deduct the enemy's penalty once,
          mark has_collided, reverse the enemy
        - overlap, already collided: reverse the enemy only
        - no overlap: clear has_collided so the next contact counts
    Enemy x Enemy:
        - overlap: reverse both, every tick the overlap persists
    """

    def resolve(
        self,
        player: Optional['Entity'],
        enemies: Sequence['Entity'],
        countdown: 'Countdown',
    ) -> CollisionReport:
        """Resolve all collisions for the current positions.

        Args:
            player: The player, or None if there is none
            enemies: Live enemies (post-movement)
            countdown: Countdown that receives penalties

        Returns:
            CollisionReport describing penalties and contacts
        """
        report = CollisionReport()
        if player is not None:
            self._resolve_player_contacts(player, enemies, countdown, report)
        self._resolve_enemy_contacts(enemies, report)
        return report

    def _resolve_player_contacts(
        self,
        player: 'Entity',
        enemies: Sequence['Entity'],
        countdown: 'Countdown',
        report: CollisionReport,
    ) -> None:
        for enemy in enemies:
            if not check_overlap(player, enemy):
                enemy.has_collided = False
                continue

            report.player_contacts.append(enemy)
            if not enemy.has_collided:
                enemy.has_collided = True
                if countdown.apply_penalty(enemy.spec.time_penalty):
                    report.penalized.append(enemy)
            enemy.reverse_velocity()

    def _resolve_enemy_contacts(
        self,
        enemies: Sequence['Entity'],
        report: CollisionReport,
    ) -> None:
        # Decide all pairs first so reversal order cannot change the outcome
        pairs = [
            (enemies[i], enemies[j])
            for i in range(len(enemies))
            for j in range(i + 1, len(enemies))
            if check_overlap(enemies[i], enemies[j])
        ]
        for a, b in pairs:
            a.reverse_velocity()
            b.reverse_velocity()
        report.enemy_pairs.extend(pairs)
