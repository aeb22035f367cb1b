"""Card catalog: loads pack data once at startup and hands out card pools.

Two on-disk formats are understood. The compact format keeps every card
text once in global ``white``/``black`` arrays and lets each pack in
``metadata`` refer to them by index; the full format is a list of packs
that already carry their cards.
"""
import json
import logging

from cah.exceptions import CatalogError
from cah.models import BlackCard, WhiteCard

logger = logging.getLogger(__name__)


class CardCatalog:
    def __init__(self, packs=None):
        self.packs = packs or []

    def init_app(self, app):
        path = app.config.get('CARDS_PATH')
        if app.config.get('CARDS_FORMAT', 'compact') == 'full':
            self.packs = self._read_full(path)
        else:
            self.packs = self._read_compact(path)
        if not self.packs:
            raise CatalogError(f"No packs found in {path}")
        app.extensions['cah_catalog'] = self
        app.logger.info(f"[catalog] loaded packs={len(self.packs)} source={path}")

    @classmethod
    def from_compact(cls, path):
        return cls(cls._read_compact(path))

    @classmethod
    def from_full(cls, path):
        return cls(cls._read_full(path))

    @staticmethod
    def _read_json(path):
        try:
            with open(path, encoding='utf-8') as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Failed to load card catalog from {path}: {exc}") from exc

    @classmethod
    def _read_compact(cls, path):
        return hydrate_compact(cls._read_json(path))

    @classmethod
    def _read_full(cls, path):
        data = cls._read_json(path)
        if not isinstance(data, list):
            raise CatalogError(f"Full card catalog {path} must be a list of packs")
        packs = []
        for raw in data:
            if not isinstance(raw, dict) or not isinstance(raw.get('name'), str):
                logger.warning(f"[catalog-skip] malformed pack entry {raw!r:.80}")
                continue
            packs.append({
                'name': raw['name'],
                'official': bool(raw.get('official')),
                'description': raw.get('description'),
                'icon': raw.get('icon'),
                'white': [{'text': c['text']} for c in raw.get('white') or [] if isinstance(c, dict) and isinstance(c.get('text'), str)],
                'black': [{'text': c['text'], 'pick': c.get('pick', 1)} for c in raw.get('black') or [] if isinstance(c, dict) and isinstance(c.get('text'), str)],
            })
        return packs

    def list_packs(self):
        packs = []
        for pack_id, pack in enumerate(self.packs):
            summary = {
                'id': pack_id,
                'name': pack['name'],
                'official': pack['official'],
                'description': pack['description'],
                'counts': {
                    'white': len(pack['white']),
                    'black': len(pack['black']),
                    'total': len(pack['white']) + len(pack['black']),
                },
            }
            if pack.get('icon'):
                summary['icon'] = pack['icon']
            packs.append(summary)
        return packs

    def pack_name(self, index):
        if isinstance(index, int) and 0 <= index < len(self.packs):
            return self.packs[index]['name']
        return f"Pack {index}"

    def has_pack(self, index):
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self.packs)

    def get_packs(self, indexes=None):
        """Build fresh card pools for the given pack ids (all packs when empty).

        Every call numbers its cards from zero so ids are unique within the
        returned pools, which is all a single lobby needs.
        """
        if not indexes:
            indexes = range(len(self.packs))
        white, black = [], []
        counter = 0
        for index in indexes:
            try:
                pack_num = int(index)
            except (TypeError, ValueError):
                pack_num = None
            if pack_num is None or not 0 <= pack_num < len(self.packs):
                logger.warning(f"[catalog-skip] pack index {index!r} requested but not loaded")
                continue
            pack = self.packs[pack_num]
            icon = pack.get('icon')
            for card in pack['white']:
                white.append(WhiteCard(f"w_{counter}", card['text'], pack_num, icon))
                counter += 1
            for card in pack['black']:
                black.append(BlackCard(f"b_{counter}", card['text'], card['pick'], pack_num, icon))
                counter += 1
        return {'white': white, 'black': black}


def hydrate_compact(data):
    """Expand the compact card index into a list of self-contained packs."""
    if not isinstance(data, dict):
        raise CatalogError("Card catalog must be a JSON object")
    metadata = data.get('metadata')
    if not isinstance(metadata, dict):
        raise CatalogError("Card catalog is missing the 'metadata' object describing packs")
    all_white = data.get('white')
    all_black = data.get('black')
    if not isinstance(all_white, list):
        raise CatalogError("Card catalog is missing the global 'white' card list")
    if not isinstance(all_black, list):
        raise CatalogError("Card catalog is missing the global 'black' card list")

    packs = []
    for pack_key, meta in metadata.items():
        if (not isinstance(meta, dict) or not isinstance(meta.get('name'), str)
                or not isinstance(meta.get('white'), list) or not isinstance(meta.get('black'), list)):
            logger.warning(f"[catalog-skip] malformed pack data for pack={pack_key!r}")
            continue

        white = []
        for idx in meta['white']:
            if not _valid_index(idx, all_white) or not isinstance(all_white[idx], str):
                logger.warning(f"[catalog-skip] white card index {idx!r} not found for pack={meta['name']!r}")
                continue
            white.append({'text': all_white[idx]})

        black = []
        for idx in meta['black']:
            card = all_black[idx] if _valid_index(idx, all_black) else None
            if (not isinstance(card, dict) or not isinstance(card.get('text'), str)
                    or isinstance(card.get('pick'), bool) or not isinstance(card.get('pick'), (int, float))):
                logger.warning(f"[catalog-skip] black card index {idx!r} missing or malformed for pack={meta['name']!r}")
                continue
            black.append({'text': card['text'], 'pick': int(card['pick'])})

        packs.append({
            'name': meta['name'],
            'official': bool(meta.get('official')),
            'description': meta.get('description'),
            'icon': meta.get('icon'),
            'white': white,
            'black': black,
        })
    return packs


def _valid_index(idx, items):
    return isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < len(items)
