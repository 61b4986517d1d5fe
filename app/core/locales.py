# app/core/locales.py

# Сообщения об ошибках
ERROR_CONSUMER_NOT_FOUND = "Пользователь не найден."
ERROR_FRIEND_NOT_FOUND = "Пользователь не является вашим другом."
ERROR_FRIEND_NOT_FAVORITE = "Фандинг доступен только близким друзьям автора."
ERROR_FUNDING_NOT_FOUND = "Фандинг не найден."
ERROR_PRODUCT_NOT_FOUND = "Товар не найден."
ERROR_PRODUCT_OPTION_NOT_FOUND = "Опция товара не найдена."
ERROR_PRODUCT_OPTION_MISMATCH = "Опция не относится к выбранному товару."
ERROR_ANNIVERSARY_CATEGORY_NOT_FOUND = "Категория праздника не найдена."
ERROR_USER_UNAUTHORIZED = "Недостаточно прав для этого действия."
ERROR_FUNDING_STATUS_NOT_DELETED = "Удалить можно только фандинг, который еще не начался."
ERROR_FUNDING_DURATION_NOT_VALID = "Фандинг не может длиться больше {max_days} дней."
ERROR_FUNDING_START_DATE_IS_PAST = "Дата начала не может быть в прошлом."
ERROR_FUNDING_ANNIVERSARY_DATE_IS_PAST = "Дата праздника не может быть раньше даты начала."
ERROR_FUNDING_END_DATE_IS_PAST = "Дата окончания не может быть раньше даты праздника."

# Тексты уведомлений
NOTIFICATION_FUNDING_CREATED_TITLE = "Новый фандинг"
NOTIFICATION_FUNDING_CREATED_MESSAGE = "{owner_name} открыл(а) новый фандинг!"

# Сообщения об успехе
SUCCESS_FUNDING_CREATED = "Фандинг создан."
SUCCESS_FUNDING_DELETED = "Фандинг удален."
SUCCESS_FAVORITE_TOGGLED = "Статус близкого друга изменен."
SUCCESS_FRIENDS_DELETED = "Все друзья удалены."
