from aiogram.fsm.state import State, StatesGroup


class ProfileStates(StatesGroup):
    waiting_for_name = State()
    waiting_for_surname = State()
