from aiogram.fsm.state import State, StatesGroup


class LocationStates(StatesGroup):
    waiting_for_name = State()
    waiting_for_address = State()
    waiting_for_map_url = State()
    waiting_for_description = State()
