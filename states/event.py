from aiogram.fsm.state import State, StatesGroup


class EventStates(StatesGroup):
    waiting_for_location = State()
    waiting_for_type = State()
    waiting_for_capacity = State()
    waiting_for_name = State()
    waiting_for_date = State()
    waiting_for_trainer = State()
    waiting_for_payment_phone = State()
    waiting_for_price = State()
